import html
import json

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from .session import Slot

COLORS = ['#0f172a', '#334155', '#64748b', '#94a3b8', '#cbd5e1']

THREE_PARTS_LABELS = [
    ('upper', '上庭'),
    ('middle', '中庭'),
    ('lower', '下庭'),
]

FIVE_EYES_LABELS = [
    ('left_side', '左外'),
    ('left_eye', '左眼'),
    ('middle', '间距'),
    ('right_eye', '右眼'),
    ('right_side', '右外'),
]

FEATURE_PANELS = [
    ('eyes', '👁️', '眼周与眉弓 (Periorbital)'),
    ('nose', '🌿', '鼻部三维轴线 (Nasal Axis)'),
    ('lips', '💋', '口周与唇部容量 (Perioral)'),
    ('jawline', '👤', '下颌缘及轮廓 (Jaw & Contour)'),
]

PERSPECTIVES = {
    Slot.FRONTAL: 'Frontal Perspective',
    Slot.LATERAL: 'Lateral Perspective',
    Slot.OBLIQUE: 'Oblique Perspective',
}

EXPANDED_KEY = 'expanded_feature'
PREVIEW_LENGTH = 48


def _series(values, labels):
    return pd.DataFrame({
        'name': [label for _, label in labels],
        'value': [getattr(values, field) for field, _ in labels],
    })


def three_parts_series(report):
    """Vertical thirds as a name/value frame, values untouched"""
    return _series(report.proportions.three_parts, THREE_PARTS_LABELS)


def five_eyes_series(report):
    """Horizontal fifths as a name/value frame, values untouched"""
    return _series(report.proportions.five_eyes, FIVE_EYES_LABELS)


def toggle_feature(current, feature):
    """At most one panel open; toggling the open one closes it."""
    return None if current == feature else feature


def format_score(value):
    return f"{value:g}"


def preview_text(text, limit=PREVIEW_LENGTH):
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + '…'


def three_parts_figure(series):
    """Donut chart for the vertical thirds"""
    fig = go.Figure()

    fig.add_trace(go.Pie(
        labels=series['name'],
        values=series['value'],
        hole=0.72,
        sort=False,
        marker=dict(colors=COLORS[:len(series)], line=dict(color='white', width=6)),
        textinfo='label+value',
        hovertemplate='%{label}: %{value}<extra></extra>',
    ))

    fig.update_layout(
        showlegend=True,
        legend=dict(orientation='h', yanchor='bottom', y=-0.2, xanchor='center', x=0.5),
        height=320,
        margin=dict(t=20, b=20, l=20, r=20),
        paper_bgcolor='rgba(0,0,0,0)',
        plot_bgcolor='rgba(0,0,0,0)'
    )

    return fig


def five_eyes_figure(series):
    """Horizontal bar chart for the five-eye widths"""
    fig = px.bar(
        series,
        x='value',
        y='name',
        orientation='h',
        color_discrete_sequence=[COLORS[0]],
    )

    fig.update_traces(hovertemplate='%{y}: %{x}<extra></extra>', width=0.5)
    fig.update_layout(
        xaxis=dict(visible=False),
        yaxis=dict(title=None, autorange='reversed', tickfont=dict(size=12, color=COLORS[0])),
        height=320,
        margin=dict(t=20, b=20, l=20, r=20),
        paper_bgcolor='rgba(0,0,0,0)',
        plot_bgcolor='rgba(0,0,0,0)'
    )

    return fig


def _on_toggle(feature):
    st.session_state[EXPANDED_KEY] = toggle_feature(st.session_state.get(EXPANDED_KEY), feature)


def render_header(report, images):
    cols = st.columns(3)
    for col, slot in zip(cols, Slot):
        with col:
            st.caption(PERSPECTIVES[slot])
            st.image(images[slot].to_bytes(), width='stretch')

    col_summary, col_score = st.columns([2, 1])

    with col_summary:
        st.markdown("## 三维深度诊断报告")
        st.markdown(f"""
        <p class="report-summary">
            结合多轴视角分析，当前面部美学均衡度评价为：<span class="accent">“{html.escape(report.summary)}”</span>
        </p>
        """, unsafe_allow_html=True)

    with col_score:
        st.markdown(f"""
        <div class="score-card">
            <p class="score-label">Score Index · AESTHETIC-PRO</p>
            <h2 class="score-value">{format_score(report.overall_score)}</h2>
        </div>
        """, unsafe_allow_html=True)


def render_medical_plan(items):
    """Numbered clinical plan; nothing is drawn when the model gave none."""
    if not items:
        return

    st.markdown('<div class="section-divider"></div>', unsafe_allow_html=True)
    st.markdown("## 💉 医学整形及微调方案")
    cols = st.columns(2)
    for i, item in enumerate(items):
        with cols[i % 2]:
            st.markdown(f"""
            <div class="plan-card">
                <span class="plan-index">{i + 1}</span>
                <p style="margin: 0; font-weight: 600;">{html.escape(item)}</p>
                <p class="plan-tag">Medical Directive</p>
            </div>
            """, unsafe_allow_html=True)


def render_features(features):
    st.markdown('<div class="section-divider"></div>', unsafe_allow_html=True)
    st.markdown("## 🧬 器官级三维解构")
    st.caption("点击展开查看多视角下的解剖结构分析")

    expanded = st.session_state.get(EXPANDED_KEY)
    cols = st.columns(2)
    for i, (key, icon, title) in enumerate(FEATURE_PANELS):
        content = getattr(features, key)
        is_open = expanded == key
        with cols[i % 2]:
            st.button(
                f"{icon} {title} {'▲' if is_open else '▼'}",
                key=f"feature_{key}",
                on_click=_on_toggle,
                args=(key,),
                width='stretch',
            )
            if is_open:
                st.markdown(f"""
                <div class="feature-card open">
                    <p style="margin: 0;">{html.escape(content)}</p>
                    <p class="plan-tag">● Clinical Insight</p>
                </div>
                """, unsafe_allow_html=True)
            else:
                st.markdown(f"""
                <div class="feature-card">
                    <p style="margin: 0; opacity: 0.6;">{html.escape(preview_text(content))}</p>
                </div>
                """, unsafe_allow_html=True)


def render_proportions(report):
    st.markdown('<div class="section-divider"></div>', unsafe_allow_html=True)
    col_three, col_five = st.columns(2)

    with col_three:
        st.markdown("### 垂直比例 - 三庭")
        st.plotly_chart(three_parts_figure(three_parts_series(report)), width='stretch')
        st.markdown(f'<div class="desc-card">{html.escape(report.proportions.three_parts.description)}</div>',
                    unsafe_allow_html=True)

    with col_five:
        st.markdown("### 水平比例 - 五眼")
        st.plotly_chart(five_eyes_figure(five_eyes_series(report)), width='stretch')
        st.markdown(f'<div class="desc-card">{html.escape(report.proportions.five_eyes.description)}</div>',
                    unsafe_allow_html=True)


def _suggestion_list(title, items, css_class):
    st.markdown(f"### {title}")
    rows = ''.join(f'<li>{html.escape(item)}</li>' for item in items)
    st.markdown(f'<div class="suggestion-card {css_class}"><ul>{rows}</ul></div>', unsafe_allow_html=True)


def render_suggestions(suggestions):
    st.markdown('<div class="section-divider"></div>', unsafe_allow_html=True)
    col_makeup, col_lifestyle = st.columns(2)

    with col_makeup:
        _suggestion_list("🎨 专业修容及妆造", suggestions.makeup, "makeup")

    with col_lifestyle:
        _suggestion_list("🌿 长期生活美学习惯", suggestions.lifestyle, "lifestyle")


def render_report(report, images, on_restart):
    """Draw the full report. Reads the report and images, never changes them."""
    render_header(report, images)
    render_medical_plan(report.suggestions.medical_beauty)
    render_features(report.features)
    render_proportions(report)
    render_suggestions(report.suggestions)

    with st.expander("📄 查看原始诊断数据 (JSON)"):
        st.code(json.dumps(report.to_wire(), ensure_ascii=False, indent=2), language='json')

    st.markdown('<div class="section-divider"></div>', unsafe_allow_html=True)
    st.button("🔄 重新开始诊断", key="restart", on_click=on_restart, type="primary", width='stretch')
    st.caption("Aesthetic Precision Medical Lab v3.0")
