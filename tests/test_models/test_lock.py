from __future__ import annotations

from typing import Any, Dict, List

import pytest

from depcore.constants import ROOT_ID
from depcore.exceptions import ParseError
from depcore.models.lock import Lock, LockPackage
from depcore.models.package import Package, Rename
from depcore.models.version import Version

LOCK_TOML = """
[[package]]
id = 1
name = "saturn"
version = "0.3.4"
source = "pypi+https://pypi.org/pypi/saturn/0.3.4/json"
dependencies = ["numpy 1.17.2"]

[[package]]
id = 2
name = "numpy"
version = "1.17.2"

[[package]]
id = 4
name = "numpy"
version = "1.11.0"
rename = "numpy_renamed_4"

[metadata]
"checksum saturn" = "abc123"
"""


@pytest.fixture
def packages() -> List[Package]:
    """A small resolved tree where the second numpy is renamed."""
    return [
        Package(
            1,
            ROOT_ID,
            "saturn",
            Version.new(0, 3, 4),
            deps=[(2, "numpy", Version.new(1, 17, 2))],
        ),
        Package(2, 1, "numpy", Version.new(1, 17, 2)),
        Package(
            4,
            3,
            "numpy",
            Version.new(1, 11, 0),
            rename=Rename.yes(3, 4, "numpy_renamed_4"),
        ),
    ]


@pytest.mark.unit
class TestLockPackage:
    """Tests for LockPackage snapshots."""

    def test_from_package(self, packages: List[Package]) -> None:
        locked = LockPackage.from_package(packages[0], source="pypi")

        assert locked == LockPackage(
            id=1,
            name="saturn",
            version="0.3.4",
            source="pypi",
            dependencies=("numpy 1.17.2",),
            rename=None,
        )

    def test_from_package_without_deps(self, packages: List[Package]) -> None:
        """Test a leaf package has no dependency list at all."""
        assert LockPackage.from_package(packages[1]).dependencies is None

    def test_from_package_keeps_rename(self, packages: List[Package]) -> None:
        assert LockPackage.from_package(packages[2]).rename == "numpy_renamed_4"

    def test_full_version_text(self) -> None:
        package = Package(1, ROOT_ID, "black", Version.from_str("19.3b0"))

        assert LockPackage.from_package(package).version == "19.3.0b0"

    def test_to_dict_omits_unset(self) -> None:
        assert LockPackage(2, "numpy", "1.17.2").to_dict() == {
            "id": 2,
            "name": "numpy",
            "version": "1.17.2",
        }

    def test_to_dict_full(self) -> None:
        locked = LockPackage(1, "saturn", "0.3.4", "pypi", ("numpy 1.17.2",), "s_1")

        assert locked.to_dict() == {
            "id": 1,
            "name": "saturn",
            "version": "0.3.4",
            "source": "pypi",
            "dependencies": ["numpy 1.17.2"],
            "rename": "s_1",
        }

    def test_from_dict(self) -> None:
        data = {"id": 1, "name": "saturn", "version": "0.3.4", "dependencies": ["a 1"]}

        assert LockPackage.from_dict(data) == LockPackage(
            1, "saturn", "0.3.4", dependencies=("a 1",)
        )

    @pytest.mark.parametrize(
        "data,message",
        [
            ({"name": "a", "version": "1.0"}, "missing field 'id'"),
            ({"id": 1, "version": "1.0"}, "missing field 'name'"),
            ({"id": "1", "name": "a", "version": "1.0"}, "id must be an integer"),
            ({"id": True, "name": "a", "version": "1.0"}, "id must be an integer"),
            ({"id": 1, "name": "a", "version": 1.0}, "version must be a string"),
            ({"id": 1, "name": "a", "version": "1", "source": 3}, "source"),
            ({"id": 1, "name": "a", "version": "1", "rename": 3}, "rename"),
            ({"id": 1, "name": "a", "version": "1", "dependencies": "b"}, "strings"),
            ({"id": 1, "name": "a", "version": "1", "dependencies": [1]}, "strings"),
        ],
    )
    def test_from_dict_invalid(self, data: Dict[str, Any], message: str) -> None:
        with pytest.raises(ParseError) as exc_info:
            LockPackage.from_dict(data)

        assert message in str(exc_info.value)


@pytest.mark.unit
class TestLock:
    """Tests for complete lock snapshots."""

    def test_from_packages(self, packages: List[Package]) -> None:
        lock = Lock.from_packages(packages, metadata={"checksum saturn": "abc123"})

        assert [p.id for p in lock.packages] == [1, 2, 4]
        assert lock.metadata == {"checksum saturn": "abc123"}

    def test_empty_lock(self) -> None:
        """Test a lock without packages has no package list."""
        lock = Lock.from_packages([])

        assert lock.package is None
        assert lock.packages == ()
        assert lock.to_dict() == {"metadata": {}}

    def test_find_includes_renamed(self, packages: List[Package]) -> None:
        lock = Lock.from_packages(packages)

        assert [p.version for p in lock.find("NumPy")] == ["1.17.2", "1.11.0"]
        assert lock.find("scipy") == []

    def test_to_dict(self, packages: List[Package]) -> None:
        data = Lock.from_packages(packages[1:2]).to_dict()

        assert data == {
            "metadata": {},
            "package": [{"id": 2, "name": "numpy", "version": "1.17.2"}],
        }

    def test_dict_round_trip(self, packages: List[Package]) -> None:
        lock = Lock.from_packages(packages, metadata={"k": "v"}, source="pypi")

        assert Lock.from_dict(lock.to_dict()) == lock

    @pytest.mark.parametrize(
        "data",
        [
            {"package": {"id": 1}},
            {"package": ["not a table"]},
            {"metadata": {"k": 1}},
            {"metadata": "text"},
        ],
    )
    def test_from_dict_invalid(self, data: Dict[str, Any]) -> None:
        with pytest.raises(ParseError):
            Lock.from_dict(data)


@pytest.mark.unit
class TestLockFromToml:
    """Tests for Lock.from_toml."""

    def test_parses_lock_file(self) -> None:
        lock = Lock.from_toml(LOCK_TOML)

        assert len(lock.packages) == 3
        assert lock.packages[0] == LockPackage(
            1,
            "saturn",
            "0.3.4",
            "pypi+https://pypi.org/pypi/saturn/0.3.4/json",
            ("numpy 1.17.2",),
        )
        assert lock.packages[2].rename == "numpy_renamed_4"
        assert lock.metadata == {"checksum saturn": "abc123"}

    def test_empty_text(self) -> None:
        assert Lock.from_toml("") == Lock()

    def test_invalid_toml(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            Lock.from_toml("[[package]\nid = ")

        assert "Invalid lock TOML" in str(exc_info.value)

    def test_wrong_shape(self) -> None:
        with pytest.raises(ParseError):
            Lock.from_toml('[[package]]\nname = "saturn"\n')
