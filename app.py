import streamlit as st
import asyncio
import logging

from aesthetic_lab.client import AnalysisClient
from aesthetic_lab.config import configure_logging, load_settings
from aesthetic_lab.intake import ACCEPTED_TYPES
from aesthetic_lab.report import render_report
from aesthetic_lab.session import AnalysisPhase, AnalysisSession, Slot

# Set page config with the clinic theme
st.set_page_config(
    page_title="Pro Aesthetic Lab",
    page_icon="🔬",
    layout="wide"
)

configure_logging()
logger = logging.getLogger("aesthetic_lab.app")

SESSION_KEY = "aesthetic_session"


@st.cache_resource
def get_settings():
    """Credential and model settings, read once per server process"""
    return load_settings()


@st.cache_resource
def get_client():
    return AnalysisClient(get_settings())


def get_session():
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = AnalysisSession()
    return st.session_state[SESSION_KEY]


def upload_key(slot):
    return f"upload_{slot.value}"


def on_upload(slot):
    get_session().capture(slot, st.session_state.get(upload_key(slot)))


def on_submit():
    session = get_session()
    if session.is_ready and session.phase in (AnalysisPhase.IDLE, AnalysisPhase.ERROR):
        session.begin()


def on_restart():
    """Drop everything, uploads included, and start over"""
    logger.info("Restarting session")
    for key in list(st.session_state.keys()):
        del st.session_state[key]


def render_sidebar(settings):
    with st.sidebar:
        st.markdown("### ⚙️ 诊断引擎")
        st.caption(f"Model: {settings.model}")
        if not settings.has_credential:
            st.warning("⚠️ 未配置 GEMINI_API_KEY，诊断请求将无法完成。")


def render_upload(session):
    st.markdown("""
    <div class="hero">
        <h2>解构美学真相<br><span class="accent">全维三维诊断</span></h2>
        <p>为了获得最精准的临床级诊断建议，请分别上传您的正脸、90度正侧位及45度斜侧位照片。</p>
    </div>
    """, unsafe_allow_html=True)

    cols = st.columns(3)
    for col, slot in zip(cols, Slot):
        with col:
            st.markdown(f"""
            <div class="upload-label">
                <h4>{slot.label}</h4>
                <p>{slot.hint}</p>
            </div>
            """, unsafe_allow_html=True)
            st.file_uploader(
                slot.label,
                type=ACCEPTED_TYPES,
                key=upload_key(slot),
                on_change=on_upload,
                args=(slot,),
                label_visibility="collapsed",
            )
            image = session.slots[slot]
            if image is not None:
                st.image(image.to_bytes(), caption="✅ 已上传 · 重新选择即可更换", width="stretch")

    if session.error:
        st.error(f"⚠️ {session.error}")

    st.button(
        "生成临床级诊断报告" if session.is_ready else "请补全三张诊断影像",
        key="submit",
        disabled=not session.is_ready,
        on_click=on_submit,
        type="primary",
        width="stretch",
    )
    st.caption("🛡️ 隐私加密传输 • 🧬 生物识别模型")


def render_analyzing(session):
    st.markdown("""
    <div class="hero">
        <h3>正在进行多轴视角诊断...</h3>
        <p class="tag">AI is synthesizing frontal, lateral, and oblique data</p>
    </div>
    """, unsafe_allow_html=True)

    with st.spinner("🧬 Analyzing with AI..."):
        asyncio.run(session.run(get_client()))
    st.rerun()


def main():
    # Clinic theme: slate surfaces with a rose accent
    st.markdown("""
    <style>
    .main-header {
        display: flex;
        align-items: center;
        justify-content: space-between;
        padding: 1rem 0;
        border-bottom: 1px solid #f1f5f9;
        margin-bottom: 2rem;
    }

    .main-header h1 {
        font-size: 1.6em;
        font-weight: 900;
        color: #0f172a;
        margin: 0;
    }

    .main-header .badges span {
        font-size: 0.75em;
        font-weight: 800;
        color: #94a3b8;
        margin-left: 1.5rem;
        letter-spacing: 0.1em;
    }

    .accent {
        color: #f43f5e;
        font-weight: 700;
    }

    .tag, .plan-tag {
        font-size: 0.7em;
        font-weight: 800;
        text-transform: uppercase;
        letter-spacing: 0.15em;
        color: #64748b;
        margin-top: 0.5rem;
    }

    .hero {
        text-align: center;
        margin: 2rem 0 3rem 0;
    }

    .hero h2 {
        font-size: 3em;
        font-weight: 900;
        color: #0f172a;
        line-height: 1.1;
    }

    .hero p {
        font-size: 1.1em;
        color: #64748b;
    }

    .upload-label h4 {
        color: #0f172a;
        margin-bottom: 0;
    }

    .upload-label p {
        color: #94a3b8;
        font-size: 0.85em;
    }

    .score-card {
        background: #0f172a;
        color: white;
        padding: 1.5rem 2rem;
        border-radius: 24px;
        text-align: center;
        box-shadow: 0 20px 40px rgba(15, 23, 42, 0.2);
    }

    .score-card .score-label {
        font-size: 0.7em;
        font-weight: 800;
        opacity: 0.5;
        letter-spacing: 0.1em;
        margin: 0;
    }

    .score-card .score-value {
        font-size: 3.5em;
        font-weight: 900;
        color: white;
        margin: 0;
    }

    .report-summary {
        color: #64748b;
        font-size: 1.05em;
        line-height: 1.7;
    }

    .plan-card {
        background: #0f172a;
        color: #f1f5f9;
        padding: 1.5rem;
        border-radius: 20px;
        margin: 0.75rem 0;
    }

    .plan-index {
        display: inline-block;
        background: #e11d48;
        color: white;
        font-weight: 900;
        border-radius: 12px;
        padding: 0.2rem 0.8rem;
        margin-bottom: 0.75rem;
    }

    .feature-card {
        background: #f8fafc;
        border: 1px solid #f1f5f9;
        padding: 1.25rem 1.5rem;
        border-radius: 20px;
        margin-bottom: 1.5rem;
        color: #475569;
    }

    .feature-card.open {
        background: #0f172a;
        color: #cbd5e1;
        border-color: #0f172a;
        box-shadow: 0 20px 40px rgba(15, 23, 42, 0.25);
    }

    .feature-card.open .plan-tag {
        color: #f43f5e;
    }

    .desc-card {
        background: #f8fafc;
        padding: 1.5rem;
        border-radius: 20px;
        border: 1px solid #f1f5f9;
        color: #475569;
        font-weight: 600;
        line-height: 1.7;
    }

    .suggestion-card {
        padding: 1.5rem 2rem;
        border-radius: 24px;
        border: 1px solid #f1f5f9;
        font-weight: 600;
        line-height: 1.8;
    }

    .suggestion-card.makeup {
        background: rgba(238, 242, 255, 0.6);
        color: #312e81;
    }

    .suggestion-card.lifestyle {
        background: rgba(236, 253, 245, 0.6);
        color: #064e3b;
    }

    .section-divider {
        height: 1px;
        background: #f1f5f9;
        margin: 2.5rem 0;
    }
    </style>
    """, unsafe_allow_html=True)

    st.markdown("""
    <div class="main-header">
        <div>
            <h1>🔬 Pro Aesthetic Lab</h1>
            <span class="tag accent">Medical Grade AI</span>
        </div>
        <div class="badges">
            <span>✔ 三视角融合</span>
            <span>✔ 骨相诊断</span>
        </div>
    </div>
    """, unsafe_allow_html=True)

    settings = get_settings()
    render_sidebar(settings)

    session = get_session()

    if session.phase in (AnalysisPhase.IDLE, AnalysisPhase.ERROR):
        render_upload(session)
    elif session.phase == AnalysisPhase.ANALYZING:
        render_analyzing(session)
    elif session.report is not None:
        render_report(session.report, session.slots, on_restart)


if __name__ == "__main__":
    main()
