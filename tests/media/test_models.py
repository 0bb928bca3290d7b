"""Tests for media domain models."""

import pytest
from pydantic import ValidationError

from mediahub.media.models import (
    DeriveOutcome,
    Dimension,
    Media,
    MediaType,
    RawFile,
    Thumbnail,
    ThumbnailResult,
)


class TestRawFile:
    def test_origin_key_defaults_to_id(self):
        assert RawFile(id="a", mime="image/png").origin_key == "a"

    def test_origin_key_uses_origin(self):
        assert RawFile(id="a", mime="image/png", origin_id="root").origin_key == "root"

    def test_json_roundtrip_keeps_options(self):
        file = RawFile(id="a", mime="image/png", options={"visibility": "public"})
        assert RawFile.model_validate_json(file.model_dump_json()) == file


class TestMedia:
    def test_accessors(self):
        derived = RawFile(id="d", mime="image/png", origin_id="a")
        media = Media(type="video", file=RawFile(id="a", mime="video/mp4"), raw_derives=[derived])

        assert media.id == "a"
        assert media.get_type() == "video"
        assert media.get_origin_key() == "a"
        assert media.get_raw_derives() == [derived]
        assert media.get_meta() is None

    def test_raw_derives_copy(self):
        media = Media(type="image", file=RawFile(id="a", mime="image/png"))
        media.get_raw_derives().append(RawFile(id="x", mime="image/png"))
        assert media.raw_derives == []


class TestThumbnail:
    def test_is_image_media(self):
        thumb = Thumbnail(file=RawFile(id="t", mime="image/png", origin_id="a"), code="S")
        assert thumb.get_type() == MediaType.IMAGE
        assert thumb.get_origin_key() == "a"


class TestDimension:
    def test_size(self):
        assert Dimension(width=3, height=4).size == (3, 4)

    @pytest.mark.parametrize("width, height", [(0, 10), (10, -1)])
    def test_rejects_non_positive(self, width: int, height: int):
        with pytest.raises(ValidationError):
            Dimension(width=width, height=height)


class TestOutcomes:
    def test_thumbnail_result_ok(self):
        thumb = Thumbnail(file=RawFile(id="t", mime="image/png"), code="S")
        assert ThumbnailResult(code="S", thumbnail=thumb).ok is True
        assert ThumbnailResult(code="S", error=OSError("x")).ok is False

    def test_derive_outcome_skipped(self):
        file = RawFile(id="d", mime="application/pdf")
        assert DeriveOutcome(file=file).skipped is True
        media = Media(type="image", file=file)
        assert DeriveOutcome(file=file, media=media).skipped is False
