"""Pipeline orchestration for the plan and prompt-run flows."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from .config import ConfigError, PathgenConfig, load_config
from .errors import ContentGenerationError, FileSystemError, PathgenError
from .failsafe import fallback_plan
from .generation import ContentProvider, ContentRequester, ProgressCallback, generate_files
from .llm.provider import ProviderRegistry, shared_registry
from .llm.runner import LLMRunner
from .logging import get_logger
from .models import (
    ExistingPathsSummary,
    FailedPath,
    GenerationResult,
    PathKind,
    PathPlanItem,
    PlanOutcome,
)
from .planning.extract import extract_json
from .planning.paths import parent_path
from .planning.plan import build_plan, dedupe_paths, filter_plan
from .planning.prompts import build_plan_prompts
from .templating.resolver import AI_INPUT_SYSTEM_PROMPT, Selection, collect_selections, resolve_template
from .templating.scanner import choice_tokens
from .workspace import FileSystem, LocalFileSystem, summarize_workspace

Selector = Callable[[Sequence[PathPlanItem]], Sequence[str]]
FileSystemFactory = Callable[[Path], FileSystem]


def select_all(items: Sequence[PathPlanItem]) -> List[str]:
    return [item.path for item in items]


def glob_selector(patterns: Sequence[str]) -> Selector:
    """Build a selector keeping plan items that match any of `patterns`."""

    def _select(items: Sequence[PathPlanItem]) -> List[str]:
        if not patterns:
            return select_all(items)
        return [item.path for item in items if any(fnmatchcase(item.path, p) for p in patterns)]

    return _select


@dataclass
class PathsOutcome:
    """Result of materialising a directory/file plan."""

    plan: PlanOutcome
    created: List[str] = field(default_factory=list)
    failed: List[FailedPath] = field(default_factory=list)


@dataclass
class PromptRunOutcome:
    """Result of running a prompt template end to end."""

    prompt: str
    plan: PlanOutcome
    targets: List[str]
    result: GenerationResult


class Orchestrator:
    """Coordinates planning, selection and generation against one workspace."""

    def __init__(
        self,
        llm_runner: LLMRunner | None = None,
        *,
        providers: ProviderRegistry | None = None,
        fs_factory: FileSystemFactory | None = None,
        progress: ProgressCallback | None = None,
    ) -> None:
        self._llm_runner = llm_runner
        self.providers = providers if providers is not None else shared_registry()
        self._fs_factory = fs_factory or LocalFileSystem
        self.progress = progress
        self.logger = get_logger("orchestrator")

    # ------------------------------------------------------------------
    # Public pipelines

    def run_generate_paths(
        self,
        path: str,
        instructions: str,
        *,
        kinds: Optional[Iterable[PathKind]] = None,
        selector: Selector | None = None,
    ) -> PathsOutcome:
        """Plan directories/files for `instructions` and create the selected ones."""
        root = Path(path).expanduser().resolve()
        fs = self._fs_factory(root)
        plan = self._plan_paths(root, fs, instructions, kinds)
        outcome = PathsOutcome(plan=plan)
        if not plan.items:
            self.logger.info("The response did not include any paths to create")
            return outcome

        chosen = set((selector or select_all)(plan.items))
        selected = [item for item in plan.items if item.path in chosen]
        if not selected:
            self.logger.info("No paths selected")
            return outcome

        outcome.created, outcome.failed = self.materialize(selected, fs)
        return outcome

    def preview_paths(
        self,
        path: str,
        instructions: str,
        *,
        kinds: Optional[Iterable[PathKind]] = None,
    ) -> PlanOutcome:
        """Return the plan for `instructions` without touching the workspace."""
        root = Path(path).expanduser().resolve()
        return self._plan_paths(root, self._fs_factory(root), instructions, kinds)

    def run_prompt(
        self,
        path: str,
        template: str,
        *,
        picks: Mapping[int, Selection] | None = None,
        values: Mapping[str, object] | None = None,
        selector: Selector | None = None,
        targets: Sequence[str] | None = None,
        overwrite: bool | None = None,
    ) -> PromptRunOutcome:
        """Resolve `template`, plan files from it and generate the selected ones.

        When `targets` is given those paths are generated as-is and no plan is
        requested from the provider.
        """
        root = Path(path).expanduser().resolve()
        config = self._load_config(root)
        fs = self._fs_factory(root)

        prompt = self.resolve_prompt(config, template, picks=picks, values=values)
        summary = self.summarize(fs, config)

        if targets is not None:
            chosen = dedupe_paths(targets)
            file_plan = PlanOutcome(items=[])
            self.logger.info("Generating %d explicit path(s)", len(chosen))
        else:
            self.logger.info("Planning files for prompt %r", prompt.split("\n", 1)[0][:40])
            plan = self.request_plan(config, prompt, summary, [PathKind.DIRECTORY, PathKind.FILE])
            file_plan = PlanOutcome(
                items=filter_plan(plan.items, [PathKind.FILE]),
                fallback=plan.fallback,
                reason=plan.reason,
            )
            if not file_plan.items:
                self.logger.info("No files were proposed for this prompt")
                return PromptRunOutcome(prompt=prompt, plan=file_plan, targets=[], result=GenerationResult())
            chosen = dedupe_paths((selector or select_all)(file_plan.items))

        effective_overwrite = config.generation.overwrite if overwrite is None else overwrite
        result = generate_files(
            prompt,
            chosen,
            effective_overwrite,
            self._content_provider(config, summary),
            fs,
            progress=self.progress,
        )
        return PromptRunOutcome(prompt=prompt, plan=file_plan, targets=chosen, result=result)

    # ------------------------------------------------------------------
    # Stages

    def resolve_prompt(
        self,
        config: PathgenConfig,
        template: str,
        *,
        picks: Mapping[int, Selection] | None = None,
        values: Mapping[str, object] | None = None,
    ) -> str:
        tokens = choice_tokens(template)
        selections = collect_selections(tokens, picks, ask=self._ask(config))
        return resolve_template(template, selections, values or {})

    def summarize(self, fs: FileSystem, config: PathgenConfig) -> ExistingPathsSummary:
        summary = summarize_workspace(
            fs,
            limit=config.generation.existing_path_limit,
            exclude=config.generation.exclude,
        )
        self.logger.debug(
            "Workspace summary: %d directories, %d files",
            len(summary.directories),
            len(summary.files),
        )
        return summary

    def request_plan(
        self,
        config: PathgenConfig,
        instructions: str,
        summary: ExistingPathsSummary,
        kinds: Sequence[PathKind],
    ) -> PlanOutcome:
        """Ask the provider for a path plan, falling back to the static plan on failure."""
        system, user = build_plan_prompts(instructions, summary, kinds)
        fallback = False
        reason = None
        try:
            runner = self._resolve_llm_runner(config)
            response = runner.run(user, system=system, json_mode=True)
            parsed = extract_json(response)
        except RuntimeError as exc:
            self._log_exception("Path plan request failed; using fallback plan", exc)
            parsed = fallback_plan()
            fallback = True
            reason = str(exc)

        items = filter_plan(build_plan(parsed), kinds)
        self.logger.info("Plan contains %d path(s)%s", len(items), " (fallback)" if fallback else "")
        return PlanOutcome(items=items, fallback=fallback, reason=reason)

    def materialize(
        self, items: Sequence[PathPlanItem], fs: FileSystem
    ) -> tuple[List[str], List[FailedPath]]:
        """Create selected directories, and parent folders plus empty files for file items."""
        created: List[str] = []
        failed: List[FailedPath] = []
        for item in items:
            try:
                if item.kind is PathKind.DIRECTORY:
                    fs.create_directory(item.path)
                else:
                    fs.create_directory(parent_path(item.path))
                    if not fs.exists(item.path):
                        fs.write_file(item.path, (item.content or "").encode("utf-8"))
            except FileSystemError as exc:
                self.logger.error("Failed to create %s: %s", item.path, exc.reason)
                failed.append(FailedPath(path=item.path, reason=exc.reason))
                continue
            created.append(item.path)
        return created, failed

    # ------------------------------------------------------------------
    # Internal helpers

    def _plan_paths(
        self,
        root: Path,
        fs: FileSystem,
        instructions: str,
        kinds: Optional[Iterable[PathKind]],
    ) -> PlanOutcome:
        if not instructions.strip():
            raise PathgenError("No instructions provided")
        self.logger.info("Planning paths for %s", root)
        config = self._load_config(root)
        wanted = list(kinds) if kinds is not None else list(config.generation.kinds)
        summary = self.summarize(fs, config)
        return self.request_plan(config, instructions.strip(), summary, wanted)

    def _load_config(self, root: Path) -> PathgenConfig:
        try:
            config = load_config(root)
        except ConfigError as exc:
            self.logger.warning("Ignoring invalid configuration: %s", exc)
            config = PathgenConfig(root=root)
        self.providers.observe(config.llm)
        return config

    def _resolve_llm_runner(self, config: PathgenConfig) -> LLMRunner:
        if self._llm_runner is not None:
            return self._llm_runner
        return self.providers.resolve(config.llm)

    def _ask(self, config: PathgenConfig) -> Callable[[str], str]:
        def _answer(prompt: str) -> str:
            runner = self._resolve_llm_runner(config)
            return runner.run(prompt, system=AI_INPUT_SYSTEM_PROMPT)

        return _answer

    def _content_provider(
        self, config: PathgenConfig, summary: ExistingPathsSummary
    ) -> ContentProvider:
        try:
            runner = self._resolve_llm_runner(config)
        except PathgenError as exc:
            self.logger.warning("Provider unavailable; files will receive fallback content: %s", exc)
            message = str(exc)

            def _unavailable(prompt: str, all_paths: Sequence[str], target: str) -> str:
                raise ContentGenerationError(message)

            return _unavailable
        return ContentRequester(runner, summary)

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.warning("%s: %s", message, exc)


__all__ = [
    "Orchestrator",
    "PathsOutcome",
    "PromptRunOutcome",
    "Selector",
    "glob_selector",
    "select_all",
]
