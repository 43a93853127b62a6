import uuid

import pytest

from lostfound.errors import NotFoundError, RemoteError, ValidationError
from lostfound.utils.storage_service import MAX_IMAGE_SIZE, store_image, validate_image

from conftest import PNG_BYTES


def test_store_image_returns_public_url(storage):
    owner = uuid.uuid4()

    url = store_image(storage, "item-images", owner, "image/png", PNG_BYTES)

    assert url.startswith(f"http://testserver/storage/item-images/{owner}/")
    assert url.endswith(".png")
    assert storage.owns_url("item-images", url)
    assert not storage.owns_url("proofs", url)


@pytest.mark.parametrize(
    "content_type, data",
    [
        ("application/pdf", PNG_BYTES),
        (None, PNG_BYTES),
        ("image/png", b""),
        ("image/jpeg", b"x" * (MAX_IMAGE_SIZE + 1)),
    ],
)
def test_validate_image_rejects(content_type, data):
    with pytest.raises(ValidationError):
        validate_image(content_type, data)


def test_upload_does_not_overwrite(storage):
    storage.upload("avatars", "u1/a.png", PNG_BYTES)

    with pytest.raises(RemoteError):
        storage.upload("avatars", "u1/a.png", PNG_BYTES)

    storage.upload("avatars", "u1/a.png", b"new", upsert=True)
    assert (storage.root / "avatars" / "u1" / "a.png").read_bytes() == b"new"


def test_paths_stay_inside_bucket(storage):
    with pytest.raises(ValidationError):
        storage.upload("proofs", "../avatars/x.png", PNG_BYTES)
    with pytest.raises(NotFoundError):
        storage.upload("secrets", "x.png", PNG_BYTES)

    assert not storage.owns_url("proofs", "http://testserver/storage/proofs/../avatars/x.png")


def test_owned_url_must_sit_under_uploader(storage):
    owner, other = uuid.uuid4(), uuid.uuid4()
    url = store_image(storage, "proofs", owner, "image/png", PNG_BYTES)
    store_image(storage, "proofs", other, "image/png", PNG_BYTES)

    assert storage.owns_url("proofs", url, owner_id=owner)
    assert not storage.owns_url("proofs", url, owner_id=other)

    file_name = url.rsplit("/", 1)[1]
    sneaky = f"http://testserver/storage/proofs/{other}/../{owner}/{file_name}"
    assert not storage.owns_url("proofs", sneaky, owner_id=other)
