import io
import logging

import requests
from PIL import Image

from models import ErrorKind, GeneratedImage, StageResult

logger = logging.getLogger(__name__)

GENERATION_FAILED = 'Error generating image'


class ImageGenerator:
    """Text-to-image through the Hugging Face inference API."""

    def __init__(self, api_key, model_url, timeout=None, log=None):
        self.api_key = api_key
        self.model_url = model_url
        self.timeout = timeout
        self.log = log or logger

    def generate(self, prompt):
        try:
            response = requests.post(
                self.model_url,
                headers={
                    'Authorization': f'Bearer {self.api_key}',
                    'Accept': 'application/json',
                    'Content-Type': 'application/json',
                },
                json={
                    'inputs': prompt,
                    'options': {'wait_for_model': True},
                },
                timeout=self.timeout
            )
            response.raise_for_status()

            data = response.content
            content_type = response.headers.get('content-type', '')
            detected = self._detect_format(data)
            if not content_type.startswith('image/'):
                content_type = detected

            self.log.info(f'Generated image: {len(data)} bytes, {content_type}')
            return StageResult.success(GeneratedImage(data=data, content_type=content_type))
        except Exception as e:
            self.log.error(f'Error creating image: {str(e)}')
            return StageResult.failure(ErrorKind.GENERATION, GENERATION_FAILED, str(e))

    @staticmethod
    def _detect_format(data):
        """Check the payload decodes as an image and return its MIME type."""
        image = Image.open(io.BytesIO(data))
        image.verify()
        if not image.format:
            raise ValueError('Image format not detected')
        return Image.MIME.get(image.format, f'image/{image.format.lower()}')
