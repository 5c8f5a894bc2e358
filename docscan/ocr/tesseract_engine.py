"""Tesseract OCR adapter producing positioned text fragments.

Tesseract reports individual words; the adapter groups them into line
fragments (union box, mean confidence) so the scanner sees the same
shape of input as from any other OCR collaborator.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import numpy as np
import pytesseract
from PIL import Image

from docscan.ocr.fragments import BoundingBox, TextFragment
from docscan.utils.exceptions import OCREngineNotAvailableError, OCRProcessingError
from docscan.utils.logger import get_logger

logger = get_logger(__name__)

LANGUAGE_CODES: dict[str, str] = {
    "en": "eng",
    "hi": "hin",
    "bn": "ben",
    "ta": "tam",
    "te": "tel",
    "mr": "mar",
    "gu": "guj",
    "kn": "kan",
    "ml": "mal",
    "pa": "pan",
    "fr": "fra",
    "de": "deu",
    "es": "spa",
}


@runtime_checkable
class FragmentSource(Protocol):
    """Anything that turns an image into OCR text fragments.

    Implementations raise ``OCRProcessingError`` when recognition fails.
    """

    def extract_fragments(
        self, image: object, languages: Sequence[str]
    ) -> list[TextFragment]: ...


def to_tesseract_languages(languages: Sequence[str]) -> str:
    """Map ISO 639-1 codes to a Tesseract language string such as ``eng+hin``.

    Unknown codes are passed through unchanged; an empty list means English.
    """
    codes = [LANGUAGE_CODES.get(lang.lower(), lang) for lang in languages]
    return "+".join(dict.fromkeys(codes)) or "eng"


class TesseractEngine:
    """Fragment source backed by Tesseract via pytesseract.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        psm: Tesseract page segmentation mode.
    """

    def __init__(self, tesseract_cmd: str | None = None, psm: int = 3) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.psm = psm

    def extract_fragments(
        self,
        image: np.ndarray | Image.Image,
        languages: Sequence[str] = ("en",),
    ) -> list[TextFragment]:
        """Recognize text and return one fragment per detected line.

        Args:
            image: Input image as a numpy array or PIL image.
            languages: ISO 639-1 language codes to recognize.

        Returns:
            Line fragments in Tesseract reading order.

        Raises:
            OCREngineNotAvailableError: If the Tesseract binary is missing.
            OCRProcessingError: If Tesseract fails on the image.
        """
        pil_image = image if isinstance(image, Image.Image) else Image.fromarray(image)
        lang = to_tesseract_languages(languages)

        try:
            data = pytesseract.image_to_data(
                pil_image,
                lang=lang,
                config=f"--psm {self.psm}",
                output_type=pytesseract.Output.DICT,
            )
        except pytesseract.TesseractNotFoundError as exc:
            raise OCREngineNotAvailableError("tesseract") from exc
        except pytesseract.TesseractError as exc:
            raise OCRProcessingError(str(exc)) from exc

        fragments = self._group_lines(data, languages[0] if languages else "en")
        logger.info("OCR produced %d line fragments", len(fragments))
        return fragments

    def _group_lines(self, data: dict, language: str) -> list[TextFragment]:
        """Group Tesseract word rows into line fragments.

        Args:
            data: ``image_to_data`` output in dict form.
            language: Language tag recorded on each fragment.

        Returns:
            Line fragments ordered by first appearance.
        """
        lines: dict[tuple[int, int, int], list[int]] = {}
        for i in range(len(data["text"])):
            conf = float(data["conf"][i])
            if conf <= 0 or not str(data["text"][i]).strip():
                continue
            key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            lines.setdefault(key, []).append(i)

        fragments: list[TextFragment] = []
        for line_index, ((_, paragraph, _), rows) in enumerate(lines.items()):
            boxes = [
                BoundingBox(
                    x=float(data["left"][i]),
                    y=float(data["top"][i]),
                    width=float(data["width"][i]),
                    height=float(data["height"][i]),
                )
                for i in rows
            ]
            confidences = [float(data["conf"][i]) / 100.0 for i in rows]
            fragments.append(
                TextFragment(
                    text=" ".join(str(data["text"][i]).strip() for i in rows),
                    box=BoundingBox.union(boxes),
                    confidence=sum(confidences) / len(confidences),
                    line=line_index,
                    paragraph=paragraph,
                    language=language,
                )
            )
        return fragments
