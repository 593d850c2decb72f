"""appleauth CLI - Main commands."""
import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

app = typer.Typer(
    name="appleauth",
    help="Apple ID sign-in with two-factor authentication",
    add_completion=False
)
console = Console()


def default_cookie_path() -> Path:
    return Path.home() / ".config" / "appleauth" / "cookies"


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def build_client(cookie_file: Optional[Path]):
    from appleauth import APIConfig, AppleAuthClient, ConsolePrompt, ConsoleSink
    
    config = APIConfig(cookie_file=cookie_file or default_cookie_path())
    return AppleAuthClient(
        config,
        prompt=ConsolePrompt(console),
        log_sink=ConsoleSink(console)
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show HTTP traffic"),
):
    """Configure logging for all commands."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@app.command()
def login(
    account: str = typer.Option(None, "--account", "-a", envvar="APPLEAUTH_ACCOUNT", help="Apple ID"),
    password: str = typer.Option(None, "--password", "-p", help="Apple ID password"),
    cookie_file: Path = typer.Option(
        None, "--cookie-file", envvar="APPLEAUTH_COOKIE_FILE", help="Where session cookies are kept"
    ),
):
    """Sign in and save the session cookies."""
    from appleauth import legible_description, AppleAuthError
    
    async def do_login():
        client = build_client(cookie_file)
        try:
            result = await client.start(account, password)
        except (AppleAuthError, ValueError) as e:
            message = escape(legible_description(e, include_tag=True))
            console.print(f"[red]Login failed: {message}[/red]", highlight=False, soft_wrap=True)
            raise typer.Exit(1)
        finally:
            await client.close()
        
        if not result.authenticated:
            console.print("[yellow]Signed in without a session; see the messages above.[/yellow]")
            raise typer.Exit(1)
        
        console.print("[green]Session is valid[/green]")
    
    run_async(do_login())


@app.command()
def session(
    cookie_file: Path = typer.Option(
        None, "--cookie-file", envvar="APPLEAUTH_COOKIE_FILE", help="Where session cookies are kept"
    ),
):
    """Check whether the stored session is still valid."""
    from appleauth import legible_description, AppleAuthError
    
    async def check():
        client = build_client(cookie_file)
        try:
            valid = await client.is_session_valid()
        except AppleAuthError as e:
            message = escape(legible_description(e, include_tag=True))
            console.print(f"[red]Session check failed: {message}[/red]", highlight=False, soft_wrap=True)
            raise typer.Exit(1)
        finally:
            await client.close()
        
        if not valid:
            console.print("[red]No valid session. Run 'appleauth login' first.[/red]")
            raise typer.Exit(1)
        console.print("[green]Session is valid[/green]")
    
    run_async(check())


@app.command()
def logout(
    cookie_file: Path = typer.Option(
        None, "--cookie-file", envvar="APPLEAUTH_COOKIE_FILE", help="Where session cookies are kept"
    ),
):
    """Delete stored session cookies."""
    from appleauth import FileCookieStorage
    
    storage = FileCookieStorage(cookie_file or default_cookie_path())
    if storage.exists():
        storage.delete()
        console.print("[green]Logged out successfully[/green]")
    else:
        console.print("[yellow]No stored session[/yellow]")


if __name__ == "__main__":
    app()
