import asyncio
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from pydantic import ValidationError

from client.auth_repository import AuthenticationRepository, AuthenticationState
from client.file_upload import FileUpload
from client.http_client import BookStoreHttpClient
from client.models import Author, Book, LoginModel, RegistrationModel
from client.repositories import AuthorRepository, BookRepository
from client.token_store import TokenStore


console = Console()

app = typer.Typer(help="BookStore command line client", no_args_is_help=True)
authors_app = typer.Typer(help="Manage authors", no_args_is_help=True)
books_app = typer.Typer(help="Manage books", no_args_is_help=True)
app.add_typer(authors_app, name="authors")
app.add_typer(books_app, name="books")


def _run(coro):
    return asyncio.run(coro)


def _fail(message: str) -> None:
    console.print(f"[bold red]{message}[/]")
    raise typer.Exit(code=1)


def _validation_message(error: ValidationError) -> str:
    messages = []
    for err in error.errors():
        field = ".".join(str(part) for part in err["loc"]) or "input"
        messages.append(f"{field}: {err['msg']}")
    return "; ".join(messages)


def _author_name(author: Optional[Author]) -> str:
    return f"{author.firstname} {author.lastname}" if author else "-"


def _price(value: Optional[float]) -> str:
    return f"{value:.2f}" if value is not None else "-"


# --- Account ---

@app.command()
def register(
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
):
    """Create a customer account"""
    try:
        model = RegistrationModel(email_address=email, password=password, confirm_password=password)
    except ValidationError as e:
        _fail(_validation_message(e))

    async def _register():
        async with BookStoreHttpClient() as http_client:
            return await AuthenticationRepository(http_client).register(model)

    if not _run(_register()):
        _fail("Registration failed")
    console.print("[green]Registration successful, you can now log in[/]")


@app.command()
def login(
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True),
):
    """Log in and remember the access token"""
    try:
        model = LoginModel(email_address=email, password=password)
    except ValidationError as e:
        _fail(_validation_message(e))

    async def _login():
        async with BookStoreHttpClient() as http_client:
            return await AuthenticationRepository(http_client).login(model)

    if not _run(_login()):
        _fail("Invalid email or password")
    console.print(f"[green]Logged in as {email}[/]")


@app.command()
def logout():
    """Forget the stored access token"""
    TokenStore().clear()
    console.print("Logged out")


@app.command()
def whoami():
    """Show the logged in user"""
    state = AuthenticationState(TokenStore())
    if not state.is_authenticated:
        _fail("Not logged in")
    roles = ", ".join(state.roles) or "-"
    console.print(Panel(
        f"[bold]{state.email}[/]\nRoles: {roles}\nExpires: {state.expires_at}",
        title="Current user",
    ))


# --- Authors ---

@authors_app.command("list")
def list_authors():
    """List all authors"""
    async def _list():
        async with BookStoreHttpClient() as http_client:
            repo = AuthorRepository(http_client)
            return await repo.get_all(repo.endpoints.authors)

    authors = _run(_list())
    table = Table(title="Authors", box=box.SIMPLE)
    table.add_column("ID", justify="right")
    table.add_column("First name")
    table.add_column("Last name")
    table.add_column("Books", justify="right")
    for author in authors:
        table.add_row(str(author.id), author.firstname, author.lastname, str(len(author.books)))
    console.print(table)


@authors_app.command("show")
def show_author(author_id: int):
    """Show an author and their books"""
    async def _get():
        async with BookStoreHttpClient() as http_client:
            repo = AuthorRepository(http_client)
            return await repo.get(repo.endpoints.authors, author_id)

    author = _run(_get())
    if author is None:
        _fail(f"Author {author_id} not found")

    body = f"[bold]{_author_name(author)}[/]\n\n{author.bio or ''}"
    if author.books:
        body += "\n\nBooks:\n" + "\n".join(f"  {b.id}. {b.title}" for b in author.books)
    console.print(Panel(body, title=f"Author {author.id}"))


@authors_app.command("create")
def create_author(
    firstname: str = typer.Option(..., prompt=True),
    lastname: str = typer.Option(..., prompt=True),
    bio: Optional[str] = typer.Option(None),
):
    """Create an author (administrators only)"""
    author = Author(firstname=firstname, lastname=lastname, bio=bio)

    async def _create():
        async with BookStoreHttpClient() as http_client:
            repo = AuthorRepository(http_client)
            return await repo.create(repo.endpoints.authors, author)

    if not _run(_create()):
        _fail("Author creation failed")
    console.print("[green]Author created[/]")


@authors_app.command("update")
def update_author(
    author_id: int,
    firstname: Optional[str] = typer.Option(None),
    lastname: Optional[str] = typer.Option(None),
    bio: Optional[str] = typer.Option(None),
):
    """Update an author (administrators only)"""
    async def _update():
        async with BookStoreHttpClient() as http_client:
            repo = AuthorRepository(http_client)
            author = await repo.get(repo.endpoints.authors, author_id)
            if author is None:
                return None
            changes = {"firstname": firstname, "lastname": lastname, "bio": bio}
            updated = author.model_copy(update={k: v for k, v in changes.items() if v is not None})
            return await repo.update(repo.endpoints.authors, updated, author_id)

    result = _run(_update())
    if result is None:
        _fail(f"Author {author_id} not found")
    if not result:
        _fail("Author update failed")
    console.print("[green]Author updated[/]")


@authors_app.command("delete")
def delete_author(author_id: int, yes: bool = typer.Option(False, "--yes", "-y")):
    """Delete an author (administrators only)"""
    if not yes:
        typer.confirm(f"Delete author {author_id}?", abort=True)

    async def _delete():
        async with BookStoreHttpClient() as http_client:
            repo = AuthorRepository(http_client)
            return await repo.delete(repo.endpoints.authors, author_id)

    if not _run(_delete()):
        _fail("Author deletion failed")
    console.print("[green]Author deleted[/]")


# --- Books ---

@books_app.command("list")
def list_books():
    """List all books"""
    async def _list():
        async with BookStoreHttpClient() as http_client:
            repo = BookRepository(http_client)
            return await repo.get_all(repo.endpoints.books)

    books = _run(_list())
    table = Table(title="Books", box=box.SIMPLE)
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Year", justify="right")
    table.add_column("ISBN")
    table.add_column("Price", justify="right")
    table.add_column("Author")
    for book in books:
        table.add_row(
            str(book.id), book.title, str(book.year or "-"), book.isbn,
            _price(book.price), _author_name(book.author)
        )
    console.print(table)


@books_app.command("show")
def show_book(book_id: int):
    """Show a book"""
    async def _get():
        async with BookStoreHttpClient() as http_client:
            repo = BookRepository(http_client)
            return await repo.get(repo.endpoints.books, book_id)

    book = _run(_get())
    if book is None:
        _fail(f"Book {book_id} not found")

    lines = [
        f"[bold]{book.title}[/] ({book.year or 'n/a'})",
        f"ISBN: {book.isbn}",
        f"Price: {_price(book.price)}",
        f"Author: {_author_name(book.author)}",
        f"Image: {book.image or '-'}",
    ]
    if book.summary:
        lines += ["", book.summary]
    console.print(Panel("\n".join(lines), title=f"Book {book.id}"))


@books_app.command("create")
def create_book(
    title: str = typer.Option(..., prompt=True),
    isbn: str = typer.Option(..., prompt=True),
    author_id: int = typer.Option(..., prompt=True),
    year: Optional[int] = typer.Option(None),
    summary: Optional[str] = typer.Option(None),
    price: Optional[float] = typer.Option(None),
    image: Optional[str] = typer.Option(None, help="Path to a cover image"),
):
    """Create a book (administrators only)"""
    async def _create():
        async with BookStoreHttpClient() as http_client:
            book = Book(title=title, isbn=isbn, author_id=author_id, year=year, summary=summary, price=price)
            if image:
                book.image, book.file = FileUpload(http_client).encode_file(image)
            repo = BookRepository(http_client)
            return await repo.create(repo.endpoints.books, book)

    if not _run(_create()):
        _fail("Book creation failed")
    console.print("[green]Book created[/]")


@books_app.command("update")
def update_book(
    book_id: int,
    title: Optional[str] = typer.Option(None),
    isbn: Optional[str] = typer.Option(None),
    author_id: Optional[int] = typer.Option(None),
    year: Optional[int] = typer.Option(None),
    summary: Optional[str] = typer.Option(None),
    price: Optional[float] = typer.Option(None),
    image: Optional[str] = typer.Option(None, help="Path to a new cover image"),
):
    """Update a book (administrators only)"""
    async def _update():
        async with BookStoreHttpClient() as http_client:
            repo = BookRepository(http_client)
            book = await repo.get(repo.endpoints.books, book_id)
            if book is None:
                return None
            changes = {
                "title": title, "isbn": isbn, "author_id": author_id,
                "year": year, "summary": summary, "price": price,
            }
            updated = book.model_copy(update={k: v for k, v in changes.items() if v is not None})
            # Only resend image content when it changes
            updated.file = None
            if image:
                updated.image, updated.file = FileUpload(http_client).encode_file(image)
            return await repo.update(repo.endpoints.books, updated, book_id)

    result = _run(_update())
    if result is None:
        _fail(f"Book {book_id} not found")
    if not result:
        _fail("Book update failed")
    console.print("[green]Book updated[/]")


@books_app.command("delete")
def delete_book(book_id: int, yes: bool = typer.Option(False, "--yes", "-y")):
    """Delete a book (administrators only)"""
    if not yes:
        typer.confirm(f"Delete book {book_id}?", abort=True)

    async def _delete():
        async with BookStoreHttpClient() as http_client:
            repo = BookRepository(http_client)
            return await repo.delete(repo.endpoints.books, book_id)

    if not _run(_delete()):
        _fail("Book deletion failed")
    console.print("[green]Book deleted[/]")


if __name__ == "__main__":
    app()
