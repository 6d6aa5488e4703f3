"""Unit tests for the recording ReportLab backend."""

import pytest

from capdoc_toolkit.exporter.output.backend import BackendError, PageIndexError, ReportLabBackend, load_image


@pytest.fixture
def backend():
    return ReportLabBackend(210, 297, title="Test")


class TestPages:

    def test_when_pages_added_then_indices_are_sequential(self, backend):
        assert [backend.add_page() for _ in range(3)] == [0, 1, 2]
        assert backend.page_count == 3
        assert backend.current_page == 2

    def test_when_drawing_before_first_page_then_page_index_error(self, backend):
        with pytest.raises(PageIndexError):
            backend.text("orphan", 10, 10)

    def test_when_selecting_missing_page_then_page_index_error(self, backend):
        backend.add_page()
        with pytest.raises(PageIndexError):
            backend.set_page(3)

    def test_when_revisiting_page_then_ops_recorded_on_that_page(self, backend):
        # Arrange
        backend.add_page()
        backend.add_page()

        # Act
        backend.set_page(0)
        backend.text("back on first", 20, 30)

        # Assert
        assert backend.texts(0) == ["back on first"]
        assert backend.texts(1) == []


class TestDrawingValidation:

    def test_when_unknown_style_then_backend_error(self, backend):
        backend.add_page()
        with pytest.raises(BackendError):
            backend.text("x", 0, 0, style="heavy")

    def test_when_image_missing_then_backend_error(self, backend, tmp_path):
        backend.add_page()
        with pytest.raises(BackendError):
            backend.image(tmp_path / "missing.png", 0, 0, 10, 10)

    def test_when_image_exists_then_recorded(self, backend, sample_image):
        # Arrange
        backend.add_page()

        # Act
        backend.image(sample_image, 20, 10, 16, 8)

        # Assert
        op = backend.operations(0)[0]
        assert op.kind == "image"
        assert (op.width, op.height) == (16, 8)

    def test_when_preloaded_image_then_same_reader_reused(self, backend, sample_image):
        # Arrange
        reader = load_image(sample_image)
        backend.add_page()
        backend.add_page()

        # Act
        backend.set_page(0)
        backend.image(reader, 20, 10, 16, 8)
        backend.set_page(1)
        backend.image(reader, 20, 10, 16, 8)

        # Assert
        first, second = backend.operations(0)[0], backend.operations(1)[0]
        assert first.options["reader"] is reader
        assert second.options["reader"] is reader

    def test_when_loading_missing_image_then_backend_error(self, tmp_path):
        with pytest.raises(BackendError, match="missing.png"):
            load_image(tmp_path / "missing.png")


class TestMeasurement:

    def test_when_text_measured_then_wider_text_is_wider(self, backend):
        assert backend.text_width("WWWW", size=10) > backend.text_width("iiii", size=10)

    def test_when_wrapping_then_every_line_fits(self, backend):
        # Act
        lines = backend.wrap_text("lorem ipsum dolor " * 30, 80, size=9)

        # Assert
        assert len(lines) > 1
        assert all(backend.text_width(line, size=9) <= 80 + 1e-6 for line in lines)

    def test_when_empty_text_then_no_lines(self, backend):
        assert backend.wrap_text("", 80) == []


class TestSerialize:

    def test_when_serialized_then_pdf_bytes_with_all_pages(self, backend):
        # Arrange
        for i in range(3):
            backend.add_page()
            backend.text(f"Page {i + 1}", 20, 30)
            backend.rect(20, 40, 50, 20, fill=(240, 240, 240), stroke=(0, 0, 0), radius=2)
            backend.line(20, 70, 190, 70)
        backend.set_page(1)
        backend.text("WATERMARK", 105, 148, size=50, align="center", angle=45, opacity=0.1)

        # Act
        pdf = backend.serialize()

        # Assert
        assert pdf.startswith(b"%PDF")
        assert b"/Count 3" in pdf
