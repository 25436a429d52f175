from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from monopub.core.result import Err, Ok, Result
from monopub.output.console import MockConsole
from monopub.release.errors import ReleaseError
from monopub.release.manifest import Manifest
from monopub.release.packages import Package, PackageSet
from monopub.release.publish import PublishJob, PublishQueue, PublishSummary, run_publish_pass
from monopub.release.semver import SemVer

MakePackage = Callable[..., Package]


def _published() -> dict[str, Result[str | None, ReleaseError]]:
    return {}


def _codes() -> dict[str, int]:
    return {}


def _dirs() -> list[Path]:
    return []


@dataclass
class FakeRegistry:
    published: dict[str, Result[str | None, ReleaseError]] = field(default_factory=_published)
    exit_codes: dict[str, int] = field(default_factory=_codes)
    transport_error_in: str | None = None
    publish_calls: list[Path] = field(default_factory=_dirs)

    def query_latest_version(self, name: str) -> Result[str | None, ReleaseError]:
        return self.published.get(name, Ok(None))

    def publish_command(self) -> list[str]:
        return ["npm", "publish"]

    def publish(self, package_dir: Path) -> Result[int, ReleaseError]:
        self.publish_calls.append(package_dir)
        if package_dir.name == self.transport_error_in:
            return Err(ReleaseError("publish_transport", "could not run npm publish"))
        return Ok(self.exit_codes.get(package_dir.name, 0))


class RecordingWriter:
    def __init__(self, fail_on: str | None = None) -> None:
        self.written: list[tuple[Path, str]] = []
        self._fail_on = fail_on

    def __call__(self, path: Path, manifest: Manifest, version: SemVer) -> Result[None, ReleaseError]:
        if path.parent.name == self._fail_on:
            return Err(ReleaseError("write_failed", f"cannot write {path}", path=path))
        self.written.append((path, str(version)))
        return Ok(None)


def _names(registry: FakeRegistry) -> list[str]:
    return [p.name for p in registry.publish_calls]


def test_nothing_changed(make_package: MakePackage) -> None:
    packages = PackageSet([make_package("a"), make_package("b")])
    registry = FakeRegistry()
    writer = RecordingWriter()

    result = run_publish_pass(packages, registry=registry, console=MockConsole(), write=writer)

    assert isinstance(result, Ok)
    assert result.value.state == "nothing"
    assert writer.written == []
    assert registry.publish_calls == []


def test_changed_packages_written_and_published(make_package: MakePackage) -> None:
    a = make_package("a", "1.0.1", previous="1.0.0", registry_name="@acme/a")
    b = make_package("b", "2.0.0")
    registry = FakeRegistry(published={"@acme/a": Ok("1.0.0")})
    writer = RecordingWriter()
    console = MockConsole()

    result = run_publish_pass(PackageSet([a, b]), registry=registry, console=console, write=writer)

    assert isinstance(result, Ok)
    summary = result.value
    assert summary.state == "succeeded"
    assert summary.written == ["a"]
    assert writer.written == [(a.manifest_path, "1.0.1")]
    assert _names(registry) == ["a"]
    assert " - a (@acme/a): 1.0.0 => 1.0.1" in console.messages
    assert f"$ cd {a.directory} && npm publish" in console.messages


def test_private_package_written_not_published(make_package: MakePackage) -> None:
    a = make_package("a", "1.1.0", previous="1.0.0", private=True)
    registry = FakeRegistry()
    writer = RecordingWriter()

    result = run_publish_pass(PackageSet([a]), registry=registry, console=MockConsole(), write=writer)

    assert isinstance(result, Ok)
    assert result.value.state == "nothing"
    assert writer.written == [(a.manifest_path, "1.1.0")]
    assert registry.publish_calls == []


def test_registry_already_current(make_package: MakePackage) -> None:
    a = make_package("a", "1.0.1", previous="1.0.0")
    b = make_package("b", "1.0.1", previous="1.0.0")
    registry = FakeRegistry(published={"a": Ok("1.0.1"), "b": Ok("2.0.0")})

    result = run_publish_pass(
        PackageSet([a, b]), registry=registry, console=MockConsole(), write=RecordingWriter()
    )

    assert isinstance(result, Ok)
    assert result.value.state == "nothing"
    assert registry.publish_calls == []


def test_unparsable_registry_version_publishes(make_package: MakePackage) -> None:
    a = make_package("a", "1.0.1", previous="1.0.0")
    registry = FakeRegistry(published={"a": Ok("latest")})

    run_publish_pass(PackageSet([a]), registry=registry, console=MockConsole(), write=RecordingWriter())

    assert _names(registry) == ["a"]


def test_never_published_shows_dash(make_package: MakePackage) -> None:
    a = make_package("a", "0.1.0", previous="0.0.1")
    console = MockConsole()

    run_publish_pass(
        PackageSet([a]), registry=FakeRegistry(), console=console, write=RecordingWriter()
    )

    assert " - a (a): - => 0.1.0" in console.messages


def test_first_failure_code_is_kept(make_package: MakePackage) -> None:
    packages = PackageSet(
        [
            make_package("a", "1.0.1", previous="1.0.0"),
            make_package("b", "1.0.1", previous="1.0.0"),
            make_package("c", "1.0.1", previous="1.0.0"),
        ]
    )
    registry = FakeRegistry(exit_codes={"a": 3, "b": 7})

    result = run_publish_pass(
        packages, registry=registry, console=MockConsole(), write=RecordingWriter()
    )

    assert isinstance(result, Ok)
    summary = result.value
    assert _names(registry) == ["a", "b", "c"]
    assert summary.state == "failed"
    assert summary.first_failure_code == 3
    assert summary.failed == ["a", "b"]


def test_transport_error_aborts_queue(make_package: MakePackage) -> None:
    packages = PackageSet(
        [
            make_package("a", "1.0.1", previous="1.0.0"),
            make_package("b", "1.0.1", previous="1.0.0"),
            make_package("c", "1.0.1", previous="1.0.0"),
        ]
    )
    registry = FakeRegistry(transport_error_in="b")

    result = run_publish_pass(
        packages, registry=registry, console=MockConsole(), write=RecordingWriter()
    )

    assert isinstance(result, Ok)
    summary = result.value
    assert _names(registry) == ["a", "b"]
    assert summary.aborted is not None
    assert summary.aborted.kind == "publish_transport"
    assert summary.not_run == ["c"]
    assert summary.state == "failed"


def test_query_failure_is_recorded(make_package: MakePackage) -> None:
    a = make_package("a", "1.0.1", previous="1.0.0")
    b = make_package("b", "1.0.1", previous="1.0.0")
    registry = FakeRegistry(
        published={"a": Err(ReleaseError("registry_failed", "registry query failed for a"))}
    )
    console = MockConsole()

    result = run_publish_pass(PackageSet([a, b]), registry=registry, console=console, write=RecordingWriter())

    assert isinstance(result, Ok)
    summary = result.value
    assert _names(registry) == ["b"]
    assert [e.kind for e in summary.query_failures] == ["registry_failed"]
    assert summary.state == "failed"
    assert console.has_error()


def test_write_error_stops_before_publishing(make_package: MakePackage) -> None:
    a = make_package("a", "1.0.1", previous="1.0.0")
    b = make_package("b", "1.0.1", previous="1.0.0")
    registry = FakeRegistry()

    result = run_publish_pass(
        PackageSet([a, b]), registry=registry, console=MockConsole(), write=RecordingWriter(fail_on="b")
    )

    assert isinstance(result, Err)
    assert result.error.kind == "write_failed"
    assert registry.publish_calls == []


def test_queue_is_fifo(make_package: MakePackage) -> None:
    registry = FakeRegistry()
    queue = PublishQueue(registry=registry, console=MockConsole())
    for name in ("z", "a", "m"):
        package = make_package(name)
        queue.put(
            PublishJob(
                package=name,
                registry_name=name,
                directory=package.directory,
                version=package.staged_version,
                published=None,
            )
        )
    assert len(queue) == 3

    summary = PublishSummary(queued=3)
    queue.drain(summary)

    assert len(queue) == 0
    assert _names(registry) == ["z", "a", "m"]
    assert summary.state == "succeeded"
