import io
import json
import copy

import pytest
from PIL import Image

from aesthetic_lab.config import Settings
from aesthetic_lab.intake import encode_image
from aesthetic_lab.models import FacialAnalysisReport
from aesthetic_lab.session import AnalysisSession, Slot

REPORT_PAYLOAD = {
    "overallScore": 82,
    "proportions": {
        "threeParts": {"upper": 32, "middle": 34, "lower": 34, "description": "三庭比例基本均衡"},
        "fiveEyes": {
            "leftSide": 19,
            "leftEye": 20,
            "middle": 22,
            "rightEye": 20,
            "rightSide": 19,
            "description": "内眦间距略宽",
        },
    },
    "features": {
        "eyes": "双眼睑形态自然，内眦赘皮轻度，眼裂长度与面宽比例协调，眉眼间距适中，上睑饱满度良好，外眦略上扬，睑裂高度充足，整体眼周年轻化程度高。",
        "nose": "鼻背线条流畅",
        "lips": "唇珠明显",
        "jawline": "下颌缘清晰",
    },
    "suggestions": {"makeup": ["a"], "lifestyle": ["b"]},
    "summary": "balanced",
}


def _image_bytes(fmt, color):
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color).save(buffer, format=fmt)
    return buffer.getvalue()


class FakeUpload:
    """Stands in for streamlit's UploadedFile"""

    def __init__(self, data, type="image/jpeg", name="photo.jpg"):
        self._data = data
        self.type = type
        self.name = name

    def getvalue(self):
        return self._data


class FakeAnalysisClient:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def analyze(self, frontal, lateral, oblique):
        self.calls.append((frontal, lateral, oblique))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def jpeg_bytes():
    return _image_bytes("JPEG", (200, 150, 120))


@pytest.fixture
def png_bytes():
    return _image_bytes("PNG", (10, 20, 30))


@pytest.fixture
def report_payload():
    return copy.deepcopy(REPORT_PAYLOAD)


@pytest.fixture
def report_json(report_payload):
    return json.dumps(report_payload, ensure_ascii=False)


@pytest.fixture
def report(report_payload):
    return FacialAnalysisReport.model_validate(report_payload)


@pytest.fixture
def settings():
    return Settings(api_key="test-key")


@pytest.fixture
def uploads(jpeg_bytes, png_bytes):
    return {
        Slot.FRONTAL: FakeUpload(jpeg_bytes),
        Slot.LATERAL: FakeUpload(png_bytes, type="image/png", name="side.png"),
        Slot.OBLIQUE: FakeUpload(jpeg_bytes, name="angle.jpg"),
    }


@pytest.fixture
def ready_session(uploads):
    session = AnalysisSession()
    for slot, upload in uploads.items():
        session.capture(slot, upload)
    return session


@pytest.fixture
def encoded(jpeg_bytes):
    return encode_image(jpeg_bytes)
