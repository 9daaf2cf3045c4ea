"""Classification of missing dependencies into remediation advice.

Linux maps missing libraries to apt packages; Windows buckets missing
DLLs into the C runtime and Media Foundation families. Both produce a
ValidationOutcome; raising or warning is left to the caller.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Set, Tuple

from nativedeps.catalog.loader import build_install_helper_command
from nativedeps.core.formatting import wrap_in_ascii_box
from nativedeps.core.models import OutcomeKind, ValidationOutcome

MISSING_DEPENDENCIES_HEADER = "Host system is missing dependencies!\n\n"

CRT_PREFIX = "api-ms-win-crt"
CRT_LIBRARIES = frozenset({"vcruntime140.dll", "vcruntime140_1.dll", "msvcp140.dll"})
MEDIA_FOUNDATION_LIBRARIES = frozenset({
    "mf.dll",
    "mfplat.dll",
    "msmpeg2vdec.dll",
    "evr.dll",
    "avrt.dll",
})

CRT_REMEDIATION = [
    "Some of the Universal C Runtime files cannot be found on the system. You can fix",
    "that by installing Microsoft Visual C++ Redistributable for Visual Studio from:",
    "https://support.microsoft.com/en-us/help/2977003/the-latest-supported-visual-c-downloads",
    "",
]

MEDIA_FOUNDATION_REMEDIATION = [
    "Some of the Media Foundation files cannot be found on the system. If you are",
    "on Windows Server try fixing this by running the following command in PowerShell",
    "as Administrator:",
    "",
    "    Install-WindowsFeature Server-Media-Foundation",
    "",
    "For Windows N editions visit:",
    "https://support.microsoft.com/en-us/help/3145500/media-feature-pack-list-for-windows-n-editions",
    "",
]


class LinuxClassifier:
    """Resolves missing libraries to distribution packages."""

    def __init__(
        self,
        package_mapping: Mapping[str, str],
        sdk_language: str = "python",
        use_sudo: bool = False,
    ) -> None:
        """Initialize the classifier.

        Args:
            package_mapping: Library → package mapping, overrides applied.
            sdk_language: Ecosystem whose install helper is recommended.
            use_sudo: Prefix suggested commands with "sudo ".

        Raises:
            ValueError: If the ecosystem is unknown.
        """
        self._package_mapping = dict(package_mapping)
        self._install_helper = build_install_helper_command(sdk_language, "install-deps")
        self._sudo_prefix = "sudo " if use_sudo else ""

    def resolve(self, missing: Iterable[str]) -> Tuple[Set[str], Set[str]]:
        """Split missing libraries into (packages, unresolved libraries)."""
        packages: Set[str] = set()
        unresolved: Set[str] = set()
        for library in missing:
            package = self._package_mapping.get(library)
            if package:
                packages.add(package)
            else:
                unresolved.add(library)
        return packages, unresolved

    def classify(self, missing: Set[str]) -> ValidationOutcome:
        if not missing:
            return ValidationOutcome.satisfied()

        packages, unresolved = self.resolve(missing)
        frozen_missing = frozenset(missing)

        if packages and not unresolved:
            block = "\n" + wrap_in_ascii_box("\n".join([
                "Host system is missing a few dependencies to run browsers.",
                "Please install them with the following command:",
                "",
                f"    {self._sudo_prefix}{self._install_helper}",
                "",
                "<3 nativedeps",
            ]), 1)
            return ValidationOutcome(
                kind=OutcomeKind.FATAL_MISSING_DEPENDENCIES,
                messages=(block,),
                missing=frozen_missing,
            )

        blocks: List[str] = [MISSING_DEPENDENCIES_HEADER]
        if packages:
            blocks.append("\n".join([
                "  Install missing packages with:",
                f"      {self._sudo_prefix}apt-get install " + "\\\n          ".join(sorted(packages)),
                "",
                "",
            ]))
        header = (
            "Missing libraries we didn't find packages for:"
            if packages
            else "Missing libraries are:"
        )
        blocks.append("\n".join([
            f"  {header}",
            "      " + "\n      ".join(sorted(unresolved)),
            "",
        ]))
        return ValidationOutcome(
            kind=OutcomeKind.FATAL_MISSING_DEPENDENCIES,
            messages=tuple(blocks),
            missing=frozen_missing,
        )


def is_crt_library(name: str) -> bool:
    """Universal C Runtime or Visual C++ runtime DLL."""
    return name.startswith(CRT_PREFIX) or name in CRT_LIBRARIES


def is_media_foundation_library(name: str) -> bool:
    """DLL shipped with the Windows Media Feature Pack."""
    return name in MEDIA_FOUNDATION_LIBRARIES


def bucket_windows_libraries(missing: Iterable[str]) -> Dict[str, List[str]]:
    """Partition DLL names into "crt", "media_foundation" and "other"."""
    buckets: Dict[str, List[str]] = {"crt": [], "media_foundation": [], "other": []}
    for name in sorted(missing):
        if is_crt_library(name):
            buckets["crt"].append(name)
        if is_media_foundation_library(name):
            buckets["media_foundation"].append(name)
        if not is_crt_library(name) and not is_media_foundation_library(name):
            buckets["other"].append(name)
    return buckets


class WindowsClassifier:
    """Maps missing DLLs to runtime and media feature installers.

    On an unsupported Windows version the result is a warning instead of
    a fatal error.
    """

    def __init__(self, supported: bool) -> None:
        self._supported = supported

    def classify(self, missing: Set[str]) -> ValidationOutcome:
        if not missing:
            return ValidationOutcome.satisfied()

        buckets = bucket_windows_libraries(missing)
        details: List[str] = []
        if buckets["crt"]:
            details.extend(CRT_REMEDIATION)
        if buckets["media_foundation"]:
            details.extend(MEDIA_FOUNDATION_REMEDIATION)
        details.extend([
            "Full list of missing libraries:",
            "    " + "\n    ".join(sorted(missing)),
            "",
        ])

        kind = (
            OutcomeKind.FATAL_MISSING_DEPENDENCIES
            if self._supported
            else OutcomeKind.WARNED_UNSUPPORTED_PLATFORM
        )
        return ValidationOutcome(
            kind=kind,
            messages=(MISSING_DEPENDENCIES_HEADER + "\n".join(details),),
            missing=frozenset(missing),
        )
