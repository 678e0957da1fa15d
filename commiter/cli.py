"""Command line interface for commiter."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from .commit import CommitMessageEngine
from .config import (
    describe_config,
    load_config,
    set_api_key,
    set_max_tokens,
    set_model,
)
from .exceptions import CommiterError, GitError
from .git import GitRepo, find_git_repo_root

RESET = "\033[0m"
GREEN = "\033[92m"
RED = "\033[91m"
DIM = "\033[2m"


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


class CLI:
    """Stage, synthesize a message, commit and optionally push."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="commiter",
            description="Commit staged changes with a generated message.",
        )
        parser.add_argument("-m", "--message", help="Use a custom commit message")
        parser.add_argument(
            "--max-files",
            type=int,
            default=5,
            help="Max file names per category in the generated message (default 5)",
        )
        parser.add_argument(
            "--no-add",
            action="store_true",
            help="Do not stage all changes before committing",
        )
        parser.add_argument(
            "--push",
            action="store_true",
            help="Push to origin/<current branch> after committing",
        )
        parser.add_argument(
            "--no-ai",
            action="store_true",
            help="Skip the LLM and summarise staged files locally",
        )
        parser.add_argument("--model", help="Model id for this run")
        parser.add_argument(
            "--max-tokens", type=int, help="Completion token budget for this run"
        )
        parser.add_argument("--repo-path", default=".", help="Repository path")
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Print the message instead of committing",
        )
        setup = parser.add_argument_group("configuration")
        setup.add_argument("--set-api-key", metavar="KEY", help="Persist API key")
        setup.add_argument("--set-model", metavar="ID", help="Persist model id")
        setup.add_argument(
            "--set-max-tokens", metavar="N", type=int, help="Persist token budget"
        )
        setup.add_argument(
            "--show-config", action="store_true", help="Show stored configuration"
        )
        parser.add_argument("--debug", action="store_true", help="Verbose logging")
        return parser

    def run(self, args: Optional[list[str]] = None) -> int:
        try:
            parsed = self.parser.parse_args(args)
        except SystemExit as exc:  # --help or usage error
            return exc.code if isinstance(exc.code, int) else 0
        _configure_logging(parsed.debug)

        try:
            if self._handle_config(parsed):
                return 0
            return self._commit(parsed)
        except CommiterError as exc:
            print(f"{RED}Error: {exc}{RESET}", file=sys.stderr)
            return 1

    def _handle_config(self, parsed: argparse.Namespace) -> bool:
        handled = False
        if parsed.set_api_key is not None:
            set_api_key(parsed.set_api_key)
            print(f"{GREEN}API key saved.{RESET}")
            handled = True
        if parsed.set_model is not None:
            set_model(parsed.set_model)
            print(f"{GREEN}Model set to {parsed.set_model}.{RESET}")
            handled = True
        if parsed.set_max_tokens is not None:
            set_max_tokens(parsed.set_max_tokens)
            print(f"{GREEN}Max tokens set to {parsed.set_max_tokens}.{RESET}")
            handled = True
        if parsed.show_config:
            print(describe_config(load_config()))
            handled = True
        return handled

    def _synthesize(self, repo: GitRepo, parsed: argparse.Namespace) -> str:
        config = load_config(
            overrides={"model": parsed.model, "max_tokens": parsed.max_tokens}
        )
        engine = CommitMessageEngine(repo, config)
        if parsed.no_ai:
            return engine.generate_deterministic(parsed.max_files)
        return asyncio.run(engine.suggest(parsed.max_files))

    def _commit(self, parsed: argparse.Namespace) -> int:
        root = find_git_repo_root(Path(parsed.repo_path))
        if root is None:
            raise GitError(f"Not a Git repository: {parsed.repo_path}")
        repo = GitRepo(str(root))

        if not parsed.no_add:
            repo.stage_all()

        message = (parsed.message or self._synthesize(repo, parsed)).strip()
        if not message:
            print(f"{RED}Unable to determine commit message.{RESET}", file=sys.stderr)
            return 1

        if parsed.dry_run:
            print(message)
            return 0

        output = repo.commit(message)
        if output:
            print(f"{DIM}{output}{RESET}")
        print(f"{GREEN}Committed:{RESET} {message}")

        if parsed.push:
            branch = repo.current_branch()
            repo.push("origin", branch or None)
            print(f"{GREEN}Pushed to origin/{branch}{RESET}")
        return 0


def main(argv: Optional[list[str]] = None) -> int:
    return CLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
