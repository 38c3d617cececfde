"""Chaining dependent generation calls.

A `Step` wraps exactly one call to a `GenerationClient` and checks what comes
back against an `ExpectedShape`. A `Pipeline` runs steps in a fixed order,
feeding each one from a projection of the `PipelineContext`, and stops at the
first failure.
"""

import asyncio
from dataclasses import dataclass, field
import logging
import time
from types import MappingProxyType
from typing import Any, Callable, Generic, Iterator, Mapping, Protocol, Sequence, TypeVar

from domain.errors import Cancelled, EmptyResult, GenerationError, UpstreamError
from domain.shapes import ExpectedShape, validate


logger = logging.getLogger(__name__)


In = TypeVar("In")


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    system: str | None = None
    params: Mapping[str, Any] = field(default_factory=dict)
    output: str = "json"

    def __post_init__(self) -> None:
        if self.output not in ("json", "image"):
            raise ValueError(f"Unsupported output: {self.output}")
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))


class GenerationClient(Protocol):
    async def generate(
        self,
        request: GenerationRequest,
        shape: ExpectedShape,
    ) -> Any:
        ...


@dataclass
class StepResult:
    value: Any = None
    error: GenerationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, Mapping, list, tuple)):
        return len(value) == 0
    return False


class Step(Generic[In]):
    def __init__(
        self,
        name: str,
        build_request: Callable[[In], GenerationRequest],
        shape: ExpectedShape,
        *,
        normalize: Callable[[In, dict[str, Any]], dict[str, Any]] | None = None,
    ) -> None:
        self.name = name
        self.build_request = build_request
        self.shape = shape
        self.normalize = normalize

    def __repr__(self) -> str:
        return f"<Step(name={self.name}, shape={self.shape.name})>"

    async def execute(self, input: In, client: GenerationClient) -> StepResult:
        request = self.build_request(input)
        logger.info("Step %s: generating %s", self.name, self.shape.name)
        started = time.monotonic()
        try:
            value = await client.generate(request, self.shape)
        except GenerationError as e:
            e.step = self.name
            return StepResult(error=e)
        except Exception as e:
            logger.warning("Step %s: upstream call failed: %r", self.name, e)
            return StepResult(error=UpstreamError(e, step=self.name))

        if _is_empty(value):
            return StepResult(error=EmptyResult(step=self.name))

        try:
            if self.normalize is not None and isinstance(value, Mapping):
                value = self.normalize(input, dict(value))
            validate(value, self.shape)
        except GenerationError as e:
            e.step = self.name
            logger.warning("Step %s: %s", self.name, e)
            return StepResult(error=e)

        logger.info("Step %s: done in %.2fs", self.name, time.monotonic() - started)
        return StepResult(value=value)


class PipelineContext(Mapping[str, Any]):
    """Outputs of the steps run so far, keyed by step name.

    Entries are written once. The initial input is kept apart in `initial`.
    """

    def __init__(self, initial: Any) -> None:
        self.initial = initial
        self._outputs: dict[str, Any] = {}
        self._last: str | None = None

    def __getitem__(self, name: str) -> Any:
        return self._outputs[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._outputs)

    def __len__(self) -> int:
        return len(self._outputs)

    def __repr__(self) -> str:
        return f"<PipelineContext(steps={list(self._outputs)})>"

    @property
    def last(self) -> Any:
        return self.initial if self._last is None else self._outputs[self._last]

    def add(self, name: str, value: Any) -> None:
        if name in self._outputs:
            raise KeyError(f"Step output already recorded: {name}")
        self._outputs[name] = value
        self._last = name

    def snapshot(self) -> dict[str, Any]:
        return dict(self._outputs)


def previous_output(ctx: PipelineContext) -> Any:
    return ctx.last


@dataclass(frozen=True)
class Stage:
    name: str
    step: Step[Any]
    project: Callable[[PipelineContext], Any] = previous_output


@dataclass
class PipelineResult:
    value: Any = None
    outputs: dict[str, Any] = field(default_factory=dict)
    error: GenerationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def failed_step(self) -> str | None:
        return None if self.error is None else self.error.step

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


class Pipeline:
    def __init__(
        self,
        stages: Sequence[Stage | tuple[str, Step[Any], Callable[[PipelineContext], Any]]],
        client: GenerationClient,
    ) -> None:
        built = tuple(s if isinstance(s, Stage) else Stage(*s) for s in stages)
        if not built:
            raise ValueError("A pipeline needs at least one stage.")
        names = [s.name for s in built]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate stage names: {names}")
        self.stages = built
        self.client = client

    def __repr__(self) -> str:
        return f"<Pipeline(stages={[s.name for s in self.stages]})>"

    async def run(
        self,
        initial: Any,
        *,
        timeout: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> PipelineResult:
        """Run every stage in order, stopping at the first failure.

        `timeout` bounds the whole run in seconds. Setting `cancel` aborts the
        in-flight call. Both end the run with a `Cancelled` failure and no
        value.
        """
        ctx = PipelineContext(initial)
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout

        for stage in self.stages:
            if cancel is not None and cancel.is_set():
                return self._failed(ctx, Cancelled(step=stage.name))
            try:
                step_input = stage.project(ctx)
            except GenerationError as e:
                e.step = stage.name
                return self._failed(ctx, e)

            remaining = None if deadline is None else deadline - loop.time()
            if remaining is not None and remaining <= 0:
                return self._failed(ctx, Cancelled("timed out", step=stage.name))

            result = await self._execute(stage, step_input, remaining, cancel)
            if not result.ok:
                assert result.error is not None
                return self._failed(ctx, result.error)
            ctx.add(stage.name, result.value)

        return PipelineResult(value=ctx.last, outputs=ctx.snapshot())

    async def _execute(
        self,
        stage: Stage,
        step_input: Any,
        timeout: float | None,
        cancel: asyncio.Event | None,
    ) -> StepResult:
        task = asyncio.create_task(stage.step.execute(step_input, self.client))
        waiters: set[asyncio.Future[Any]] = {task}
        cancel_waiter = None
        if cancel is not None:
            cancel_waiter = asyncio.create_task(cancel.wait())
            waiters.add(cancel_waiter)

        try:
            await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            await _abort(task)
            raise
        finally:
            if cancel_waiter is not None:
                await _abort(cancel_waiter)

        if task.done():
            return task.result()

        await _abort(task)
        reason = "cancelled" if cancel is not None and cancel.is_set() else "timed out"
        logger.info("Step %s: %s", stage.name, reason)
        return StepResult(error=Cancelled(reason, step=stage.name))

    def _failed(self, ctx: PipelineContext, error: GenerationError) -> PipelineResult:
        logger.warning("Pipeline stopped at %s: %s", error.step, error.message)
        return PipelineResult(outputs=ctx.snapshot(), error=error)


async def _abort(task: "asyncio.Task[Any]") -> None:
    if task.done():
        return
    task.cancel()
    # wait() never raises the task's own CancelledError.
    await asyncio.wait([task])
