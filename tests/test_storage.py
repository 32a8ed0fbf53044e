"""Tests for image storage, repositories and token helpers."""

from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest
from firebase_admin import auth as firebase_auth

from recipeupload.auth import AuthenticatedUser, FirebaseTokenVerifier, bearer_token
from recipeupload.errors import AuthError
from recipeupload.storage.images import (
    MAX_PRESIGN_SECONDS,
    ImageStorage,
    draft_image_path,
    final_image_path,
)
from recipeupload.storage.repository import DraftRepository


class TestImagePaths:
    """Tests for storage path helpers."""

    def test_draft_path(self):
        assert draft_image_path("u1", "d1", "photo.png") == "recipeDrafts/u1/d1-photo.png"

    def test_final_path_sanitizes_name(self):
        assert final_image_path("u1", "img", "Mom's Pho (v2)") == "recipeImages/u1/img-Mom_s_Pho__v2_"
        assert final_image_path("u1", "img", "Crème brûlée") == "recipeImages/u1/img-Cr_me_br_l_e"


class TestImageStorage:
    """Tests for ImageStorage."""

    @pytest.mark.asyncio
    async def test_upload(self, image_storage, mock_s3_client):
        await image_storage.upload("recipeDrafts/u1/d1-a.jpg", b"data", "image/jpeg")

        mock_s3_client.put_object.assert_called_once_with(
            Bucket="test-bucket",
            Key="recipeDrafts/u1/d1-a.jpg",
            Body=b"data",
            ContentType="image/jpeg",
        )

    @pytest.mark.asyncio
    async def test_temporary_url_is_capped(self, image_storage, mock_s3_client):
        await image_storage.temporary_url("a.jpg", MAX_PRESIGN_SECONDS * 2)

        kwargs = mock_s3_client.generate_presigned_url.call_args.kwargs
        assert kwargs["ExpiresIn"] == MAX_PRESIGN_SECONDS
        assert kwargs["Params"] == {"Bucket": "test-bucket", "Key": "a.jpg"}

    @pytest.mark.asyncio
    async def test_permanent_url(self, image_storage, mock_s3_client):
        assert await image_storage.permanent_url("recipeImages/u1/x") == (
            "https://cdn.example.com/recipeImages/u1/x"
        )
        mock_s3_client.generate_presigned_url.assert_not_called()

    @pytest.mark.asyncio
    async def test_permanent_url_without_public_base(self, mock_s3_client):
        storage = ImageStorage(bucket="b", public_base_url="", client=mock_s3_client)

        assert await storage.permanent_url("x") == "https://bucket.example.com/signed?sig=abc"

    @pytest.mark.asyncio
    async def test_copy_and_delete(self, image_storage, mock_s3_client):
        await image_storage.copy("src.jpg", "dst.jpg")
        await image_storage.delete("src.jpg")

        mock_s3_client.copy_object.assert_called_once_with(
            Bucket="test-bucket",
            Key="dst.jpg",
            CopySource={"Bucket": "test-bucket", "Key": "src.jpg"},
        )
        mock_s3_client.delete_object.assert_called_once_with(Bucket="test-bucket", Key="src.jpg")


class TestDraftRepository:
    """Tests for DraftRepository."""

    @pytest.mark.asyncio
    async def test_add_get_delete(self, db_session, make_draft):
        repo = DraftRepository(db_session)
        await repo.add(make_draft("d1"))

        assert (await repo.get("d1")).recipe_name == "Tomato Soup"
        assert await repo.delete("d1") is True
        assert await repo.delete("d1") is False
        assert await repo.get("d1") is None

    @pytest.mark.asyncio
    async def test_list_expired(self, db_session, make_draft):
        now = datetime(2024, 1, 2)
        repo = DraftRepository(db_session)
        await repo.add(make_draft("late", expires_at=now - timedelta(hours=1)))
        await repo.add(make_draft("later", expires_at=now - timedelta(hours=2)))
        await repo.add(make_draft("live", expires_at=now + timedelta(seconds=1)))

        expired = await repo.list_expired(now)

        assert [d.draft_id for d in expired] == ["later", "late"]

    def test_is_expired(self, make_draft):
        now = datetime(2024, 1, 2)
        assert make_draft(expires_at=now).is_expired(now) is True
        assert make_draft(expires_at=now + timedelta(seconds=1)).is_expired(now) is False


class TestTokenHelpers:
    """Tests for bearer token parsing and claim mapping."""

    @pytest.mark.parametrize(
        "header,expected",
        [
            ("Bearer abc.def", "abc.def"),
            ("bearer   abc ", "abc"),
            ("Basic dXNlcg==", None),
            ("Bearer ", None),
            ("", None),
            (None, None),
        ],
    )
    def test_bearer_token(self, header, expected):
        assert bearer_token(header) == expected

    def test_user_name_fallbacks(self):
        assert AuthenticatedUser.from_claims({"uid": "u", "name": "Ana"}).name == "Ana"
        assert AuthenticatedUser.from_claims({"uid": "u", "email": "a@b.c"}).name == "a@b.c"
        assert AuthenticatedUser.from_claims({"uid": "u"}).name == "Anonymous Chef"

    @pytest.mark.asyncio
    async def test_verifier_maps_invalid_token(self):
        verifier = FirebaseTokenVerifier(project_id="demo")
        verifier._app = MagicMock()

        with patch.object(
            firebase_auth, "verify_id_token", side_effect=ValueError("malformed")
        ):
            with pytest.raises(AuthError) as exc_info:
                await verifier.verify("bad")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_verifier_returns_user(self):
        verifier = FirebaseTokenVerifier(project_id="demo")
        verifier._app = MagicMock()

        with patch.object(
            firebase_auth, "verify_id_token", return_value={"uid": "u1", "name": "Ana"}
        ) as verify:
            user = await verifier.verify("good")

        assert user == AuthenticatedUser(uid="u1", name="Ana")
        assert verify.call_args.args == ("good",)
