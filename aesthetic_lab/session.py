import logging
from enum import Enum

from .errors import USER_FACING_ERROR, AnalysisError, InvalidTransitionError
from .intake import read_upload

logger = logging.getLogger(__name__)


class Slot(str, Enum):
    FRONTAL = "frontal"
    LATERAL = "lateral"
    OBLIQUE = "oblique"

    @property
    def label(self):
        return SLOT_LABELS[self]

    @property
    def hint(self):
        return SLOT_HINTS[self]


SLOT_LABELS = {
    Slot.FRONTAL: "正面标准照 (Frontal)",
    Slot.LATERAL: "90° 正侧位 (Lateral)",
    Slot.OBLIQUE: "45° 斜侧位 (Oblique)",
}

SLOT_HINTS = {
    Slot.FRONTAL: "分析比例、对称性及轮廓平滑度",
    Slot.LATERAL: "分析鼻唇角、下颌缘及四高三低",
    Slot.OBLIQUE: "分析中面部容量及面部平整度",
}


class AnalysisPhase(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    COMPLETED = "completed"
    ERROR = "error"


TRANSITIONS = {
    AnalysisPhase.IDLE: {AnalysisPhase.ANALYZING},
    AnalysisPhase.ERROR: {AnalysisPhase.ANALYZING},
    AnalysisPhase.ANALYZING: {AnalysisPhase.COMPLETED, AnalysisPhase.ERROR},
    AnalysisPhase.COMPLETED: set(),
}


class AnalysisSession:
    """Upload slots, current phase and the report for one browser session.

    Only this object mutates that state. The report is set exactly when the
    phase is COMPLETED.
    """

    def __init__(self):
        self.reset()

    def reset(self):
        """Back to the initial upload state"""
        self.slots = {slot: None for slot in Slot}
        self.phase = AnalysisPhase.IDLE
        self.report = None
        self.error = None

    @property
    def is_ready(self):
        return all(image is not None for image in self.slots.values())

    @property
    def images(self):
        return tuple(self.slots[slot] for slot in Slot)

    def capture(self, slot, uploaded_file):
        """Encode a selected file into a slot; empty or unreadable files are ignored."""
        slot = Slot(slot)
        image = read_upload(uploaded_file)
        if image is None:
            return None

        self.slots[slot] = image
        self.error = None
        logger.info("Captured %s image (%s, %d base64 chars)", slot.value, image.mime_type, len(image.payload))
        return image

    def _move(self, target):
        if target not in TRANSITIONS[self.phase]:
            raise InvalidTransitionError(self.phase, target)
        logger.info("Phase %s -> %s", self.phase.value, target.value)
        self.phase = target

    def begin(self):
        if not self.is_ready:
            raise InvalidTransitionError(self.phase, AnalysisPhase.ANALYZING)
        self._move(AnalysisPhase.ANALYZING)
        self.error = None

    def complete(self, report):
        self._move(AnalysisPhase.COMPLETED)
        self.report = report

    def fail(self, message=USER_FACING_ERROR):
        self._move(AnalysisPhase.ERROR)
        self.report = None
        self.error = message

    async def run(self, client):
        """Await the pending analysis call and settle the phase.

        Every service failure collapses into the one user-facing message.
        """
        if self.phase != AnalysisPhase.ANALYZING:
            raise InvalidTransitionError(self.phase, AnalysisPhase.COMPLETED)

        try:
            report = await client.analyze(*self.images)
        except AnalysisError as e:
            logger.error("Analysis failed with %s: %s", type(e).__name__, e, exc_info=True)
            self.fail()
            return None
        except Exception:
            # Never left in ANALYZING; the error still propagates
            logger.exception("Unexpected failure during analysis")
            self.fail()
            raise

        self.complete(report)
        return report
