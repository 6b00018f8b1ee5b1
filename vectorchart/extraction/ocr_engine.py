# vectorchart/extraction/ocr_engine.py
import logging
from dataclasses import dataclass

import easyocr
import numpy as np
import pytesseract
from PIL import Image

from ..config import DEFAULT_CONFIG
from ..errors import NoTextFoundError, OCREngineError
from ..models.data_types import Rectangle


logger = logging.getLogger(__name__)

# Tesseract language codes -> EasyOCR language codes
_EASYOCR_LANGUAGES = {
    "eng": "en",
    "vie": "vi",
    "fra": "fr",
    "deu": "de",
    "spa": "es",
}


@dataclass
class OCRSymbol:
    """Text recognized in a bitmap with its box in bitmap pixels."""

    text: str
    bbox: Rectangle
    confidence: float = 1.0


class OCREngine:
    def __init__(self, languages=None, gpu=False, method=None):
        """
        Wrap the OCR backends.

        Args:
            languages: Tesseract language codes, e.g. ['eng']
            gpu: Let EasyOCR use the GPU
            method: 'tesseract' (per-symbol boxes) or 'easyocr' (per-word boxes)
        """
        if languages is None:
            languages = [DEFAULT_CONFIG.OCR_LANGUAGE]
        if method is None:
            method = DEFAULT_CONFIG.OCR_METHOD
        if method not in DEFAULT_CONFIG.VALID_OCR_METHODS:
            raise ValueError(
                f"Unknown OCR method {method!r}, expected one of {DEFAULT_CONFIG.VALID_OCR_METHODS}"
            )
        self.languages = list(languages)
        self.gpu = gpu
        self.method = method
        self.min_confidence = DEFAULT_CONFIG.OCR_MIN_CONFIDENCE
        # EasyOCR loads its models on construction, so it is created on first use
        self._easyocr_reader = None

    @property
    def easyocr_reader(self):
        if self._easyocr_reader is None:
            codes = [_EASYOCR_LANGUAGES.get(lang, lang) for lang in self.languages]
            logger.info(f"Loading EasyOCR reader for {codes}")
            self._easyocr_reader = easyocr.Reader(codes, gpu=self.gpu)
        return self._easyocr_reader

    def read_symbols(self, image, language=None, method=None):
        """
        Recognize text in a rendered bitmap.

        Args:
            image: RGB numpy array (H, W, 3)
            language: Tesseract language code, defaults to the engine's first language
            method: Override the engine's backend

        Returns:
            List of OCRSymbol in bitmap coordinates (origin top-left); empty if nothing was read

        Raises:
            NoTextFoundError: if the image is empty
            OCREngineError: if the backend fails
        """
        if image is None or getattr(image, "size", 0) == 0:
            raise NoTextFoundError("Cannot run OCR on an empty image")

        language = language or self.languages[0]
        method = method or self.method
        if method == "easyocr":
            symbols = self.read_symbols_easyocr(image)
        else:
            symbols = self.read_symbols_tesseract(image, language)

        if not symbols:
            logger.warning("OCR returned no text")
        else:
            logger.debug(f"OCR ({method}) read {len(symbols)} symbol(s)")
        return symbols

    def read_symbols_tesseract(self, image, language="eng"):
        """
        Per-character boxes from Tesseract.

        Tesseract reports boxes with a bottom-left origin; they are flipped
        to the top-left origin used everywhere else.
        """
        if isinstance(image, np.ndarray):
            height = image.shape[0]
            image = Image.fromarray(image)
        else:
            height = image.height

        try:
            data = pytesseract.image_to_boxes(
                image, lang=language, output_type=pytesseract.Output.DICT
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
            raise OCREngineError(f"Tesseract failed: {exc}") from exc

        symbols = []
        for i, char in enumerate(data.get("char", [])):
            char = char.strip()
            if not char:
                continue
            left, right = data["left"][i], data["right"][i]
            top = height - data["top"][i]
            bottom = height - data["bottom"][i]
            symbols.append(OCRSymbol(
                text=char,
                bbox=Rectangle(float(left), float(top), float(right - left), float(bottom - top)),
            ))
        return symbols

    def read_symbols_easyocr(self, image, confidence_threshold=None):
        """
        Word boxes from EasyOCR.
        """
        if confidence_threshold is None:
            confidence_threshold = self.min_confidence
        try:
            results = self.easyocr_reader.readtext(image)
        except Exception as exc:  # noqa: BLE001
            raise OCREngineError(f"EasyOCR failed: {exc}") from exc

        # results format: [([box], text, confidence), ...]
        symbols = []
        for (box, text, conf) in results:
            text = text.strip()
            if conf <= confidence_threshold or not text:
                continue
            symbols.append(OCRSymbol(
                text=text,
                bbox=Rectangle.from_points((float(p[0]), float(p[1])) for p in box),
                confidence=float(conf),
            ))
        return symbols
