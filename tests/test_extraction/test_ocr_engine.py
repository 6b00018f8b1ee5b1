"""
Tests for OCREngine.

Tests cover:
- Backend selection and validation
- Tesseract per-symbol boxes (origin flip, blank characters)
- EasyOCR word boxes (confidence threshold, whitespace)
- Lazy EasyOCR reader creation and language mapping
- Backend failures wrapped in OCREngineError
"""
import pytest
import numpy as np
import pytesseract
import sys
from pathlib import Path
from unittest.mock import Mock, patch

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from vectorchart.errors import NoTextFoundError, OCREngineError
from vectorchart.extraction.ocr_engine import OCREngine
from vectorchart.models.data_types import Rectangle


# ==================== Fixtures ====================

@pytest.fixture
def sample_image():
    """Create a sample RGB image for testing."""
    return np.ones((20, 30, 3), dtype=np.uint8) * 255


@pytest.fixture
def tesseract_boxes():
    """image_to_boxes output for "4 2" (bottom-left origin)."""
    return {
        "char": ["4", " ", "2"],
        "left": [1, 0, 11],
        "right": [9, 0, 19],
        "top": [18, 0, 18],
        "bottom": [2, 0, 2],
    }


@pytest.fixture
def easyocr_engine():
    """Create OCREngine with mocked EasyOCR to avoid loading models."""
    with patch("vectorchart.extraction.ocr_engine.easyocr.Reader") as MockReader:
        mock_reader = Mock()
        mock_reader.readtext.return_value = []
        MockReader.return_value = mock_reader

        engine = OCREngine(method="easyocr")
        engine._mock_reader = mock_reader  # Store for test access
        engine._mock_reader_class = MockReader
        yield engine


# ==================== TestInitialization ====================

class TestInitialization:
    """Test OCREngine initialization."""

    def test_defaults(self):
        engine = OCREngine()
        assert engine.languages == ["eng"]
        assert engine.method == "tesseract"

    def test_unknown_method_raises(self):
        with pytest.raises(ValueError, match="paddle"):
            OCREngine(method="paddle")

    def test_reader_not_loaded_on_construction(self):
        """EasyOCR models are only loaded when first needed."""
        with patch("vectorchart.extraction.ocr_engine.easyocr.Reader") as MockReader:
            OCREngine(method="easyocr")
            MockReader.assert_not_called()


# ==================== TestReadSymbols ====================

class TestReadSymbols:
    """Test read_symbols dispatch."""

    def test_empty_image_raises(self):
        with pytest.raises(NoTextFoundError):
            OCREngine().read_symbols(np.zeros((0, 0, 3), dtype=np.uint8))

    def test_none_image_raises(self):
        with pytest.raises(NoTextFoundError):
            OCREngine().read_symbols(None)

    def test_dispatches_to_tesseract(self, sample_image, tesseract_boxes):
        with patch("vectorchart.extraction.ocr_engine.pytesseract.image_to_boxes",
                   return_value=tesseract_boxes) as image_to_boxes:
            symbols = OCREngine().read_symbols(sample_image, language="fra")

        assert [s.text for s in symbols] == ["4", "2"]
        assert image_to_boxes.call_args[1]["lang"] == "fra"

    def test_method_override(self, easyocr_engine, sample_image):
        easyocr_engine._mock_reader.readtext.return_value = [
            ([[0, 0], [10, 0], [10, 5], [0, 5]], "Jan", 0.9),
        ]
        symbols = easyocr_engine.read_symbols(sample_image)
        assert [s.text for s in symbols] == ["Jan"]

    def test_no_text_returns_empty_list(self, easyocr_engine, sample_image):
        assert easyocr_engine.read_symbols(sample_image) == []


# ==================== TestTesseract ====================

class TestTesseract:
    """Test read_symbols_tesseract."""

    def test_boxes_flipped_to_top_left_origin(self, sample_image, tesseract_boxes):
        with patch("vectorchart.extraction.ocr_engine.pytesseract.image_to_boxes",
                   return_value=tesseract_boxes):
            symbols = OCREngine().read_symbols_tesseract(sample_image)

        assert symbols[0].bbox == Rectangle(1, 2, 8, 16)
        assert symbols[1].bbox == Rectangle(11, 2, 8, 16)

    def test_blank_characters_skipped(self, sample_image, tesseract_boxes):
        with patch("vectorchart.extraction.ocr_engine.pytesseract.image_to_boxes",
                   return_value=tesseract_boxes):
            symbols = OCREngine().read_symbols_tesseract(sample_image)
        assert len(symbols) == 2

    def test_missing_binary_wrapped(self, sample_image):
        with patch("vectorchart.extraction.ocr_engine.pytesseract.image_to_boxes",
                   side_effect=pytesseract.TesseractNotFoundError()):
            with pytest.raises(OCREngineError, match="Tesseract failed"):
                OCREngine().read_symbols_tesseract(sample_image)


# ==================== TestEasyOCR ====================

class TestEasyOCR:
    """Test read_symbols_easyocr."""

    def test_filters_by_confidence_threshold(self, easyocr_engine, sample_image):
        """Should filter results below confidence threshold."""
        easyocr_engine._mock_reader.readtext.return_value = [
            ([[0, 0], [10, 0], [10, 10], [0, 10]], "high_conf", 0.9),
            ([[20, 0], [30, 0], [30, 10], [20, 10]], "low_conf", 0.3),
        ]

        result = easyocr_engine.read_symbols_easyocr(sample_image, confidence_threshold=0.5)

        assert len(result) == 1
        assert result[0].text == "high_conf"
        assert result[0].confidence == 0.9

    def test_box_from_quadrilateral(self, easyocr_engine, sample_image):
        easyocr_engine._mock_reader.readtext.return_value = [
            ([[2, 3], [12, 3], [12, 8], [2, 8]], "Feb", 0.8),
        ]
        result = easyocr_engine.read_symbols_easyocr(sample_image)
        assert result[0].bbox == Rectangle(2, 3, 10, 5)

    def test_strips_whitespace_from_text(self, easyocr_engine, sample_image):
        """Should strip whitespace and drop empty words."""
        easyocr_engine._mock_reader.readtext.return_value = [
            ([[0, 0], [10, 0], [10, 10], [0, 10]], "  test  ", 0.8),
            ([[0, 0], [10, 0], [10, 10], [0, 10]], "   ", 0.8),
        ]

        result = easyocr_engine.read_symbols_easyocr(sample_image)

        assert [s.text for s in result] == ["test"]

    def test_reader_created_once_with_mapped_languages(self, easyocr_engine, sample_image):
        easyocr_engine.read_symbols_easyocr(sample_image)
        easyocr_engine.read_symbols_easyocr(sample_image)

        easyocr_engine._mock_reader_class.assert_called_once_with(["en"], gpu=False)

    def test_backend_failure_wrapped(self, easyocr_engine, sample_image):
        easyocr_engine._mock_reader.readtext.side_effect = RuntimeError("CUDA out of memory")
        with pytest.raises(OCREngineError, match="CUDA"):
            easyocr_engine.read_symbols_easyocr(sample_image)
