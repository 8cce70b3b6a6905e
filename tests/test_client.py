"""Tests for the client package, run against the in-process API."""

import base64

import httpx
import pytest
from pydantic import ValidationError

from client.auth_repository import AuthenticationRepository, AuthenticationState
from client.endpoints import Endpoints
from client.file_upload import FileUpload
from client.http_client import BookStoreHttpClient
from client.models import Author, Book, LoginModel, RegistrationModel
from client.repositories import AuthorRepository, BookRepository
from client.token_store import TokenStore
from conftest import ADMIN_EMAIL, CUSTOMER_EMAIL, PASSWORD, make_image_bytes
from main import app

endpoints = Endpoints(base_url="http://test")


@pytest.fixture
def token_store(tmp_path):
    return TokenStore(str(tmp_path / "token.json"))


@pytest.fixture
async def http_client(db, token_store):
    async with BookStoreHttpClient(
        token_store=token_store, transport=httpx.ASGITransport(app=app)
    ) as c:
        yield c


@pytest.fixture
def auth(http_client):
    return AuthenticationRepository(http_client, endpoints)


@pytest.fixture
async def as_admin(auth):
    assert await auth.login(LoginModel(email_address=ADMIN_EMAIL, password=PASSWORD))


class TestAuthentication:

    async def test_login_stores_token(self, auth, token_store):
        assert await auth.login(LoginModel(email_address=ADMIN_EMAIL, password=PASSWORD))

        state = AuthenticationState(token_store)
        assert state.is_authenticated
        assert state.is_admin
        assert state.email == ADMIN_EMAIL
        assert state.expires_at is not None

    async def test_failed_login_stores_nothing(self, auth, token_store):
        assert not await auth.login(LoginModel(email_address=ADMIN_EMAIL, password="Wr0ngPass"))
        assert token_store.get_token() is None
        assert not AuthenticationState(token_store).is_authenticated

    async def test_customer_is_not_admin(self, auth, token_store):
        assert await auth.login(LoginModel(email_address=CUSTOMER_EMAIL, password=PASSWORD))
        state = AuthenticationState(token_store)
        assert state.roles == ["Customer"]
        assert not state.is_admin

    async def test_logout_clears_token(self, auth, token_store, as_admin):
        auth.logout()
        assert token_store.get_token() is None

    async def test_register(self, auth):
        model = RegistrationModel(
            email_address="fresh@example.com", password="abc12345", confirm_password="abc12345"
        )
        assert await auth.register(model)
        assert not await auth.register(model)

    def test_registration_passwords_must_match(self):
        with pytest.raises(ValidationError):
            RegistrationModel(
                email_address="fresh@example.com", password="abc12345", confirm_password="different"
            )


class TestRepositories:

    async def test_author_crud(self, http_client, as_admin):
        repo = AuthorRepository(http_client, endpoints)

        assert await repo.create(endpoints.authors, Author(firstname="Iain", lastname="Banks"))
        authors = await repo.get_all(endpoints.authors)
        assert [a.lastname for a in authors] == ["Banks"]

        author = authors[0]
        author.bio = "Culture series"
        assert await repo.update(endpoints.authors, author, author.id)
        assert (await repo.get(endpoints.authors, author.id)).bio == "Culture series"

        assert await repo.delete(endpoints.authors, author.id)
        assert await repo.get(endpoints.authors, author.id) is None

    async def test_book_crud_with_encoded_image(self, http_client, as_admin, tmp_path, uploads_dir):
        authors = AuthorRepository(http_client, endpoints)
        await authors.create(endpoints.authors, Author(firstname="Iain", lastname="Banks"))
        author_id = (await authors.get_all(endpoints.authors))[0].id

        cover = tmp_path / "cover.PNG"
        cover.write_bytes(make_image_bytes())
        book = Book(title="Excession", isbn="9781857234572", author_id=author_id)
        book.image, book.file = FileUpload(http_client, endpoints).encode_file(str(cover))
        assert book.image.endswith(".png")

        repo = BookRepository(http_client, endpoints)
        assert await repo.create(endpoints.books, book)

        stored = (await repo.get_all(endpoints.books))[0]
        assert stored.author.lastname == "Banks"
        detail = await repo.get(endpoints.books, stored.id)
        assert base64.b64decode(detail.file) == cover.read_bytes()
        assert (uploads_dir / book.image).is_file()

        assert await repo.delete(endpoints.books, stored.id)
        assert not (uploads_dir / book.image).exists()

    async def test_customer_writes_are_refused(self, http_client, auth):
        await auth.login(LoginModel(email_address=CUSTOMER_EMAIL, password=PASSWORD))
        repo = AuthorRepository(http_client, endpoints)
        assert not await repo.create(endpoints.authors, Author(firstname="Iain", lastname="Banks"))

    async def test_anonymous_list_is_empty(self, http_client):
        repo = BookRepository(http_client, endpoints)
        assert await repo.get_all(endpoints.books) == []


class TestFileUpload:

    async def test_upload_and_remove(self, http_client, as_admin, tmp_path, uploads_dir):
        await AuthorRepository(http_client, endpoints).create(
            endpoints.authors, Author(firstname="Iain", lastname="Banks")
        )
        books = BookRepository(http_client, endpoints)
        await books.create(endpoints.books, Book(title="Use of Weapons", isbn="9781857231359", author_id=1))
        book_id = (await books.get_all(endpoints.books))[0].id

        cover = tmp_path / "cover.png"
        cover.write_bytes(make_image_bytes())
        uploader = FileUpload(http_client, endpoints)
        assert await uploader.upload_file(book_id, str(cover), pic_name="weapons.png")
        assert (uploads_dir / "weapons.png").is_file()

        assert await uploader.remove_file(book_id)
        assert not (uploads_dir / "weapons.png").exists()
        assert (await books.get(endpoints.books, book_id)).image is None


class TestTransportFailures:

    @pytest.fixture
    async def offline_client(self, token_store):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with BookStoreHttpClient(
            token_store=token_store, transport=httpx.MockTransport(refuse)
        ) as c:
            yield c

    async def test_failures_are_reported_not_raised(self, offline_client):
        repo = AuthorRepository(offline_client, endpoints)
        assert await repo.get_all(endpoints.authors) == []
        assert await repo.get(endpoints.authors, 1) is None
        assert not await repo.create(endpoints.authors, Author(firstname="A", lastname="B"))
        assert not await AuthenticationRepository(offline_client, endpoints).login(
            LoginModel(email_address=ADMIN_EMAIL, password=PASSWORD)
        )


def test_token_store_round_trip(token_store):
    assert token_store.get_token() is None
    token_store.set_token("abc")
    assert token_store.get_token() == "abc"
    token_store.clear()
    assert token_store.get_token() is None


def test_token_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "token.json"
    path.write_text("{not json")
    assert TokenStore(str(path)).get_token() is None
