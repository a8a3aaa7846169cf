from __future__ import annotations

from dataclasses import dataclass, field

from framepace.api.render import RenderableProgram, SurfaceCapabilities
from framepace.api.window import SurfaceHandle
from framepace.rendering.presenter import Presenter
from framepace.rendering.surface import SurfaceManager
from framepace.runtime.metrics import FrameCounter
from framepace.runtime.scheduler import FrameScheduler
from framepace.runtime.time import TimingGate


class ManualClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = float(start)

    def advance(self, seconds: float) -> float:
        self.now += float(seconds)
        return self.now

    def __call__(self) -> float:
        return self.now


@dataclass(slots=True)
class FakeTexture:
    ident: int
    views: int = 0

    def create_view(self) -> tuple[str, int]:
        self.views += 1
        return ("view", self.ident)


@dataclass(slots=True)
class FakeSurfaceContext:
    configure_calls: list[dict[str, object]] = field(default_factory=list)
    textures_acquired: int = 0
    present_calls: int = 0
    unconfigure_calls: int = 0
    failures: list[BaseException] = field(default_factory=list)

    def configure(self, **kwargs: object) -> None:
        self.configure_calls.append(dict(kwargs))

    def get_current_texture(self) -> FakeTexture:
        if self.failures:
            raise self.failures.pop(0)
        self.textures_acquired += 1
        return FakeTexture(ident=self.textures_acquired)

    def present(self) -> None:
        self.present_calls += 1

    def unconfigure(self) -> None:
        self.unconfigure_calls += 1


@dataclass(slots=True)
class FakeRenderPass:
    log: list[tuple[object, ...]]

    def set_pipeline(self, pipeline: object) -> None:
        self.log.append(("set_pipeline", pipeline))

    def draw(self, vertex_count: int, instance_count: int, first_vertex: int, first_instance: int) -> None:
        self.log.append(("draw", vertex_count, instance_count, first_vertex, first_instance))

    def end(self) -> None:
        self.log.append(("end",))


@dataclass(slots=True)
class FakeEncoder:
    log: list[tuple[object, ...]]
    label: str = ""

    def begin_render_pass(self, *, color_attachments: list[dict[str, object]]) -> FakeRenderPass:
        self.log.append(("begin_render_pass", color_attachments))
        return FakeRenderPass(log=self.log)

    def finish(self) -> tuple[str, str]:
        self.log.append(("finish",))
        return ("command_buffer", self.label)


@dataclass(slots=True)
class FakeDevice:
    log: list[tuple[object, ...]] = field(default_factory=list)
    destroyed: int = 0

    def create_command_encoder(self, *, label: str = "") -> FakeEncoder:
        self.log.append(("create_command_encoder", label))
        return FakeEncoder(log=self.log, label=label)

    def destroy(self) -> None:
        self.destroyed += 1


@dataclass(slots=True)
class FakeQueue:
    submitted: list[list[object]] = field(default_factory=list)
    failures: list[BaseException] = field(default_factory=list)

    def submit(self, command_buffers: list[object]) -> None:
        if self.failures:
            raise self.failures.pop(0)
        self.submitted.append(list(command_buffers))


@dataclass(slots=True)
class FakeWindow:
    redraw_requests: int = 0
    titles: list[str] = field(default_factory=list)

    def request_redraw(self) -> None:
        self.redraw_requests += 1

    def set_title(self, title: str) -> None:
        self.titles.append(title)


@dataclass(slots=True)
class Harness:
    clock: ManualClock
    context: FakeSurfaceContext
    device: FakeDevice
    queue: FakeQueue
    window: FakeWindow
    surface_manager: SurfaceManager
    frame_counter: FrameCounter
    program: RenderableProgram
    scheduler: FrameScheduler


def make_surface_manager(
    context: FakeSurfaceContext | None = None,
    *,
    size: tuple[int, int] = (640, 480),
    presents_after_draw: bool = False,
) -> SurfaceManager:
    manager = SurfaceManager(
        context or FakeSurfaceContext(),
        FakeDevice(),
        presents_after_draw=presents_after_draw,
    )
    manager.initialize(SurfaceCapabilities(formats=("bgra8unorm-srgb",)), size)
    return manager


def make_harness(
    *,
    fps: float = 30.0,
    size: tuple[int, int] = (640, 480),
    owned_resources: tuple[object, ...] = (),
) -> Harness:
    clock = ManualClock()
    context = FakeSurfaceContext()
    device = FakeDevice()
    queue = FakeQueue()
    window = FakeWindow()
    surface_manager = SurfaceManager(context, device)
    surface_manager.initialize(SurfaceCapabilities(formats=("bgra8unorm-srgb",)), size)
    frame_counter = FrameCounter(time_source=clock)
    program = RenderableProgram(pipeline="pipeline", target_format="bgra8unorm-srgb")
    scheduler = FrameScheduler(
        surface_manager=surface_manager,
        presenter=Presenter(),
        frame_counter=frame_counter,
        gate=TimingGate.from_fps(fps),
        device=device,
        queue=queue,
        program=program,
        window=window,
        time_source=clock,
        owned_resources=owned_resources,  # type: ignore[arg-type]
    )
    return Harness(
        clock=clock,
        context=context,
        device=device,
        queue=queue,
        window=window,
        surface_manager=surface_manager,
        frame_counter=frame_counter,
        program=program,
        scheduler=scheduler,
    )


class HostWindow:
    """Window double whose loop invokes the draw handler a fixed number of times."""

    def __init__(
        self,
        *,
        frames: int = 3,
        size: tuple[int, int] = (640, 480),
        script: dict[int, tuple[object, ...]] | None = None,
        provider: object | None = None,
    ) -> None:
        self.frames = frames
        self.size = size
        self.script = dict(script or {})
        self.provider = provider
        self.pending: list[object] = []
        self.calls: list[str] = []
        self.titles: list[str] = []
        self.redraw_requests = 0
        self.closed = False
        self._handler = None

    def create_surface(self) -> SurfaceHandle:
        self.calls.append("create_surface")
        return SurfaceHandle(surface_id="main", backend="fake", provider=self.provider)

    def physical_size(self) -> tuple[int, int]:
        return self.size

    def poll_events(self) -> tuple[object, ...]:
        events = tuple(self.pending)
        self.pending.clear()
        return events

    def set_draw_handler(self, handler) -> None:
        self._handler = handler

    def request_redraw(self) -> None:
        self.redraw_requests += 1

    def set_title(self, title: str) -> None:
        self.titles.append(title)

    def run_loop(self) -> None:
        self.calls.append("run_loop")
        for frame in range(self.frames):
            if self.closed:
                break
            self.pending.extend(self.script.get(frame, ()))
            assert self._handler is not None
            self._handler()

    def stop_loop(self) -> None:
        self.calls.append("stop_loop")

    def close(self) -> None:
        self.calls.append("close")
        self.closed = True
