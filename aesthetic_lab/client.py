import base64
import logging

from google import genai
from google.genai import types
from pydantic import ValidationError

from .errors import EmptyResponseError, MalformedResponseError, ServiceUnavailableError
from .intake import EncodedImage, strip_mime_prefix
from .models import FacialAnalysisReport
from .prompts import ANALYSIS_PROMPT, RESPONSE_SCHEMA

logger = logging.getLogger(__name__)


def _payload(image):
    if isinstance(image, EncodedImage):
        image = image.data_uri
    return strip_mime_prefix(image)


def parse_report(text):
    """Parse the model's text payload into a FacialAnalysisReport.

    Raises EmptyResponseError when there is nothing to parse and
    MalformedResponseError when the JSON is invalid or has the wrong shape.
    """
    if not text or not text.strip():
        raise EmptyResponseError("AI response was empty")

    try:
        return FacialAnalysisReport.model_validate_json(text)
    except ValidationError as e:
        raise MalformedResponseError(f"Response does not match the report shape: {e.error_count()} error(s)") from e


class AnalysisClient:
    """Sends the three views plus the clinical prompt to the hosted model."""

    def __init__(self, settings, client=None):
        self.settings = settings
        self._client = client

    def _sdk_client(self):
        if self._client is not None:
            return self._client
        if not self.settings.has_credential:
            raise ServiceUnavailableError("No API key configured")
        # A fresh client per call: the async transport is bound to the running event loop
        # and is closed when the call settles
        return genai.Client(api_key=self.settings.api_key)

    def build_contents(self, frontal, lateral, oblique):
        """One user turn: frontal, lateral, oblique images, then the prompt"""
        parts = [
            types.Part.from_bytes(
                data=base64.b64decode(_payload(image)),
                mime_type=self.settings.image_mime_type,
            )
            for image in (frontal, lateral, oblique)
        ]
        parts.append(types.Part.from_text(text=ANALYSIS_PROMPT))
        return types.Content(role="user", parts=parts)

    def build_config(self):
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=RESPONSE_SCHEMA,
        )
        if self.settings.thinking_budget:
            config.thinking_config = types.ThinkingConfig(thinking_budget=self.settings.thinking_budget)
        return config

    async def analyze(self, frontal, lateral, oblique):
        """Run one analysis request and return the validated report."""
        contents = self.build_contents(frontal, lateral, oblique)
        logger.info("Requesting facial analysis from %s", self.settings.model)

        try:
            async with self._sdk_client().aio as aclient:
                response = await aclient.models.generate_content(
                    model=self.settings.model,
                    contents=contents,
                    config=self.build_config(),
                )
        except ServiceUnavailableError:
            raise
        except Exception as e:
            raise ServiceUnavailableError(f"Analysis service call failed: {e}") from e

        text = response.text
        logger.info("Received %d characters from the analysis service", len(text or ""))
        return parse_report(text)
