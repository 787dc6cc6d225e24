"""Remotely Save PRO account CLI

Connects the PRO account, shows its status and runs entitlement checks
against the locally stored settings.
"""

import argparse
import asyncio
import dataclasses
import sys
from typing import List, Optional

import httpx
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

import settings
from pro_oauth import (
    AuthorizationURLBuilder,
    PKCEManager,
    ProAccountManager,
    ProAuthError,
    check_pro_runnable_and_fix_inplace,
    default_pro_config,
)
from utils import SettingsStorage, setup_logging

console = Console()


class ProAuthCLI:
    """Host side of the PRO account flow"""

    def __init__(self, storage: Optional[SettingsStorage] = None, pkce_manager: Optional[PKCEManager] = None):
        self.storage = storage or SettingsStorage()
        self.pkce_manager = pkce_manager or PKCEManager()
        self.settings = self.storage.load_settings()
        self.manager = ProAccountManager(
            self.settings,
            settings.PLUGIN_VERSION,
            self.storage.save_callback(self.settings),
        )

    def login(self, open_browser: bool = True, has_callback: bool = False) -> bool:
        """Run the interactive login flow

        Returns:
            True if the account was connected
        """
        console.print("\n[bold]Step 1:[/bold] Authorize this device on the Remotely Save website")
        builder = AuthorizationURLBuilder(self.pkce_manager)
        if open_browser:
            auth_url = builder.start_login_flow(has_callback)
            console.print("[green][OK][/green] Browser opened")
        else:
            auth_url = builder.get_authorize_url(has_callback)
        console.print(f"If the browser did not open, visit:\n{auth_url}")

        console.print("\n[bold]Step 2:[/bold] Paste the authorization code shown after approval")
        console.print("[dim]Leave empty to finish later with the 'code' command[/dim]\n")
        code = Prompt.ask("Authorization code", default="").strip()
        if not code:
            console.print("[yellow]Login pending, run 'code <auth-code>' to finish[/yellow]")
            return False

        return asyncio.run(self.complete_login(code))

    async def complete_login(self, auth_code: str) -> bool:
        """Exchange the code with the saved verifier and fetch account data"""
        if not self.pkce_manager.load_pkce():
            console.print("[red]No pending login found. Run 'login' first.[/red]")
            return False

        def report(e: Exception):
            console.print(f"[red]Token exchange error: {e}[/red]")

        console.print("\n[bold]Step 3:[/bold] Exchanging code for tokens...")
        if not await self.manager.exchange_code(self.pkce_manager.code_verifier, auth_code, report):
            return False
        self.pkce_manager.clear_pkce()
        console.print("[green][OK][/green] Account connected")

        try:
            await self.manager.refresh_email()
            await self.manager.refresh_features()
        except (httpx.HTTPError, KeyError, ValueError) as e:
            console.print(f"[yellow]Connected, but fetching account details failed: {e}[/yellow]")
        return True

    async def refresh(self):
        """Re-download features and profile"""
        await self.manager.refresh_features()
        await self.manager.refresh_email()
        console.print("[green][OK][/green] Account details refreshed")

    async def check(self, features: List[str], conflict_action: Optional[str] = None, service_type: Optional[str] = None):
        """Run the entitlement check, optionally as if other settings were active"""
        overrides = {}
        if conflict_action is not None:
            overrides["conflict_action"] = conflict_action
        if service_type is not None:
            overrides["service_type"] = service_type
        # The copy shares the PRO record, so refreshed features are still saved
        await check_pro_runnable_and_fix_inplace(
            features,
            dataclasses.replace(self.settings, **overrides),
            settings.PLUGIN_VERSION,
            self.manager.save,
        )
        console.print(f"[green][OK][/green] Allowed: {', '.join(features)}")

    def logout(self):
        """Forget the PRO account but keep the other settings"""
        self.settings.pro = default_pro_config()
        self.storage.save_settings(self.settings)
        self.pkce_manager.clear_pkce()
        console.print("[green][OK][/green] PRO account disconnected")

    def show_status(self):
        status = self.storage.get_status(self.settings)

        table = Table(title="PRO Account Status")
        table.add_column("Property", style="cyan")
        table.add_column("Value")

        table.add_row("Connected", "Yes" if status["connected"] else "No")
        if status["connected"]:
            table.add_row("Email", status["email"] or "-")
            table.add_row("Access Token Valid", "Yes" if status["token_valid"] else "No")
            table.add_row("Access Token Expiry", status["time_until_expiry"])
            table.add_row("Re-authorize In", status["reauth_in"] or "-")
            table.add_row("Features", ", ".join(status["features"]) or "-")
        table.add_row("Settings File", str(self.storage.settings_file))

        console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Remotely Save PRO account CLI")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Connect your PRO account")
    login.add_argument("--no-browser", action="store_true", help="Only print the authorization URL")
    login.add_argument("--callback", action="store_true", help="Redirect back into the host app after approval")

    code = sub.add_parser("code", help="Finish a pending login with an authorization code")
    code.add_argument("auth_code")

    sub.add_parser("status", help="Show account status")
    sub.add_parser("refresh", help="Re-download features and profile")

    check = sub.add_parser("check", help="Check that PRO features may be used")
    check.add_argument("features", nargs="+", help="e.g. feature-smart_conflict")
    check.add_argument("--conflict-action", default=None, help="Override the stored conflict action")
    check.add_argument("--service-type", default=None, help="Override the stored service type")

    sub.add_parser("logout", help="Disconnect the PRO account")
    return parser


def main(argv: Optional[List[str]] = None):
    """Entry point for the CLI"""
    args = build_parser().parse_args(argv)
    setup_logging(debug=args.debug)

    cli = ProAuthCLI()
    try:
        if args.command == "login":
            ok = cli.login(open_browser=not args.no_browser, has_callback=args.callback)
            sys.exit(0 if ok else 1)
        elif args.command == "code":
            ok = asyncio.run(cli.complete_login(args.auth_code))
            sys.exit(0 if ok else 1)
        elif args.command == "status":
            cli.show_status()
        elif args.command == "refresh":
            asyncio.run(cli.refresh())
        elif args.command == "check":
            asyncio.run(cli.check(args.features, args.conflict_action, args.service_type))
        elif args.command == "logout":
            cli.logout()
    except ProAuthError as e:
        console.print(f"[red]ERROR:[/red] {e}")
        sys.exit(1)
    except httpx.HTTPError as e:
        console.print(f"[red]Request to the PRO website failed:[/red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
