"""
Client for the inference API that scores a radiograph per class.
"""

import logging
from typing import Optional

import httpx

from .models import PredictionSet
from ..utils.exceptions import FetchFailed, ValidationException, format_user_error
from ..utils.validators import validate_image_payload

logger = logging.getLogger(__name__)


class PredictionSource:
    """
    Fetches one prediction set per call.

    No retries and no caching happen here; a failed call surfaces as
    ``FetchFailed`` and the session decides what to show.
    """
    
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        predict_path: str = "/predict",
        timeout: float = 120.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.predict_path = predict_path if predict_path.startswith("/") else f"/{predict_path}"
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": "RadiologyAI/0.1", "Accept": "application/json"}
        )
    
    @property
    def predict_url(self) -> str:
        return f"{self.base_url}{self.predict_path}"
    
    async def __aenter__(self):
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
    
    async def aclose(self):
        await self.client.aclose()
    
    async def fetch(self, image: str) -> PredictionSet:
        """
        Send an encoded image for inference and validate the result.
        
        Raises:
            FetchFailed: On empty input, transport errors, non-2xx status
                or a body that is not JSON.
            InvalidPredictionSet: If the response breaks the label-set
                invariant (also a ``FetchFailed``).
        """
        try:
            image = validate_image_payload(image)
        except ValidationException as e:
            raise FetchFailed(e.message, e.details) from e
        
        try:
            response = await self.client.post(self.predict_url, json={"image": image})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Inference API returned %s for %s", e.response.status_code, self.predict_url)
            raise FetchFailed(
                format_user_error("fetch_failed"),
                f"HTTP {e.response.status_code} from {self.predict_url}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("Inference API request failed: %s", e)
            raise FetchFailed(
                format_user_error("fetch_failed"),
                f"{type(e).__name__}: {e}"
            ) from e
        
        try:
            payload = response.json()
        except ValueError as e:
            logger.error("Inference API returned a non-JSON body")
            raise FetchFailed(
                format_user_error("fetch_failed"),
                f"Response is not valid JSON: {e}"
            ) from e
        
        prediction_set = PredictionSet.from_response(payload)
        logger.info("Received predictions for %d classes", len(prediction_set))
        return prediction_set
