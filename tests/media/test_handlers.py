"""Tests for the built-in media handlers."""

import io
from pathlib import Path

import pytest
from PIL import Image

from mediahub.media.commands import CommandFactory
from mediahub.media.errors import NotAvailableError
from mediahub.media.handlers import AudioHandler, ImageHandler, VideoHandler
from mediahub.media.models import Dimension, MediaMeta, Thumbnail
from mediahub.storage.local import LocalStorage
from mediahub.storage.meta import MetaStore


def _image_bytes(size: tuple[int, int] = (40, 20), fmt: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (10, 120, 200)).save(buffer, format=fmt)
    return buffer.getvalue()


def _mpo_bytes(size: tuple[int, int] = (40, 20)) -> bytes:
    buffer = io.BytesIO()
    first = Image.new("RGB", size, (10, 120, 200))
    second = Image.new("RGB", size, (200, 120, 10))
    first.save(buffer, format="MPO", save_all=True, append_images=[second])
    return buffer.getvalue()


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    return LocalStorage(tmp_path)


@pytest.fixture
def meta_store(tmp_path: Path) -> MetaStore:
    return MetaStore(tmp_path)


@pytest.fixture
def image_handler(storage: LocalStorage, meta_store: MetaStore) -> ImageHandler:
    return ImageHandler(storage=storage, meta_store=meta_store)


class TestIsAvailable:
    @pytest.mark.parametrize("mime", ["image/png", "image/jpeg", "IMAGE/PNG", " image/gif "])
    def test_image_accepts_raster(self, image_handler: ImageHandler, mime: str):
        assert image_handler.is_available(mime) is True

    @pytest.mark.parametrize("mime", ["image/svg+xml", "video/mp4", "", "image"])
    def test_image_rejects_others(self, image_handler: ImageHandler, mime: str):
        assert image_handler.is_available(mime) is False

    def test_video_accepts_any_video(self, storage: LocalStorage, meta_store: MetaStore):
        handler = VideoHandler(storage=storage, meta_store=meta_store)
        assert handler.is_available("video/quicktime") is True
        assert handler.is_available("audio/mpeg") is False

    def test_audio_accepts_any_audio(self, storage: LocalStorage, meta_store: MetaStore):
        handler = AudioHandler(storage=storage, meta_store=meta_store)
        assert handler.is_available("audio/ogg") is True
        assert handler.is_available("video/ogg") is False


class TestImageMake:
    def test_make_records_dimensions(self, image_handler: ImageHandler, storage, meta_store):
        stored = storage.put(_image_bytes((40, 20)), "u", "a.png", mime="image/png")

        media = image_handler.make(stored)

        assert media.type == "image"
        assert (media.meta.width, media.meta.height) == (40, 20)
        assert meta_store.get(stored.id) == media.meta

    def test_make_reuses_stored_meta(self, image_handler: ImageHandler, storage, meta_store):
        stored = storage.put(_image_bytes(), "u", "a.png", mime="image/png")
        meta_store.save(MediaMeta(file_id=stored.id, width=1, height=2))

        media = image_handler.make(stored)

        assert (media.meta.width, media.meta.height) == (1, 2)

    def test_make_model_never_writes(self, image_handler: ImageHandler, storage, meta_store):
        stored = storage.put(_image_bytes(), "u", "a.png", mime="image/png")

        media = image_handler.make_model(stored)

        assert media.meta is None
        assert meta_store.get(stored.id) is None

    def test_make_rejects_undecodable(self, image_handler: ImageHandler, storage):
        stored = storage.put(b"garbage", "u", "a.png", mime="image/png")
        with pytest.raises(NotAvailableError):
            image_handler.make(stored)


class TestImagePicture:
    def test_returns_stored_bytes(self, image_handler: ImageHandler, storage):
        content = _image_bytes()
        stored = storage.put(content, "u", "a.png", mime="image/png")
        assert image_handler.get_picture(image_handler.make_model(stored)) == content


class TestCreateThumbnail:
    def test_stores_and_records(self, image_handler: ImageHandler, storage, meta_store):
        command = CommandFactory().make("fit")
        command.set_dimension(Dimension(width=10, height=10))

        thumb = image_handler.create_thumbnail(
            _image_bytes(), command, "S", "local", "thumbs", "origin1", {"acl": "private"}
        )

        assert isinstance(thumb, Thumbnail)
        assert thumb.code == "S"
        assert thumb.file.origin_id == "origin1"
        assert thumb.file.mime == "image/png"
        assert thumb.file.filename == "origin1_S.png"
        assert thumb.file.options == {"acl": "private"}
        assert meta_store.get(thumb.id).code == "S"
        with Image.open(io.BytesIO(storage.read(thumb.file))) as rendered:
            assert rendered.size == (10, 10)

    def test_keeps_source_format(self, image_handler: ImageHandler, storage):
        command = CommandFactory().make("widen")
        command.set_dimension(Dimension(width=10, height=10))

        thumb = image_handler.create_thumbnail(
            _image_bytes(fmt="JPEG"), command, "S", "local", "thumbs", "o"
        )

        assert thumb.file.mime == "image/jpeg"
        assert thumb.file.filename.endswith(".jpg")

    def test_multi_picture_jpeg_saved_as_jpeg(self, image_handler: ImageHandler, storage):
        content = _mpo_bytes()
        with Image.open(io.BytesIO(content)) as source:
            assert source.format == "MPO"
        command = CommandFactory().make("fit")
        command.set_dimension(Dimension(width=10, height=10))

        thumb = image_handler.create_thumbnail(content, command, "S", "local", "thumbs", "o")

        assert thumb.file.mime == "image/jpeg"
        assert thumb.file.filename == "o_S.jpg"
        assert image_handler.is_available(thumb.file.mime)
        with Image.open(io.BytesIO(storage.read(thumb.file))) as rendered:
            assert rendered.format == "JPEG"

    def test_unclaimed_format_falls_back_to_png(self, image_handler: ImageHandler):
        command = CommandFactory().make("fit")
        command.set_dimension(Dimension(width=10, height=10))

        thumb = image_handler.create_thumbnail(
            _image_bytes(fmt="PPM"), command, "S", "local", "thumbs", "o"
        )

        assert thumb.file.mime == "image/png"
        assert thumb.file.filename == "o_S.png"

    def test_undecodable_content(self, image_handler: ImageHandler):
        command = CommandFactory().make("fit")
        command.set_dimension(Dimension(width=10, height=10))
        with pytest.raises(NotAvailableError):
            image_handler.create_thumbnail(b"nope", command, "S", "local", "t", "o")


class TestVideoPicture:
    def test_none_without_poster(self, storage, meta_store):
        handler = VideoHandler(storage=storage, meta_store=meta_store)
        video = storage.put(b"\x00", "u", "v.mp4", mime="video/mp4")
        assert handler.get_picture(handler.make(video)) is None

    def test_first_image_derive_is_poster(self, storage, meta_store):
        handler = VideoHandler(storage=storage, meta_store=meta_store)
        video = storage.put(b"\x00", "u", "v.mp4", mime="video/mp4")
        storage.put(b"subs", "u", "v.vtt", mime="text/vtt", origin_id=video.id)
        poster = _image_bytes()
        storage.put(poster, "u", "v.png", mime="image/png", origin_id=video.id)

        assert handler.get_picture(handler.make(video)) == poster


class TestAudioPicture:
    def test_always_none(self, storage, meta_store):
        handler = AudioHandler(storage=storage, meta_store=meta_store)
        audio = storage.put(b"ID3", "u", "a.mp3", mime="audio/mpeg")
        assert handler.get_picture(handler.make(audio)) is None
