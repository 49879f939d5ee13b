"""
Version discovery helper.

getversion(specifier, base=Unset) resolves a module, walks up from its file to
the nearest pyproject.toml and returns its [project] version. When no manifest
is found (an installed wheel, for instance), the version recorded in the
distribution metadata that provides the module is returned instead.

    >>> import asyncio
    >>> from portolan import Parser
    >>> parser = Parser(version=asyncio.run(getversion("portolan")))
"""
import asyncio
import importlib.metadata
import importlib.util
import tomllib
from pathlib import Path

from .utils import Unset, coalesce


def _manifest(origin, /):
    for directory in Path(origin).resolve().parents:
        # installed packages carry no manifest of their own
        if directory.name in ("site-packages", "dist-packages"):
            return None
        if (candidate := directory / "pyproject.toml").is_file():
            return candidate
    return None


def _read(path, /):
    with open(path, "rb") as file:
        return tomllib.load(file)


def _distribution(specifier, /):
    top = specifier.partition(".")[0]
    for distribution in importlib.metadata.packages_distributions().get(top, ()):
        return importlib.metadata.version(distribution)
    return importlib.metadata.version(top)


async def getversion(specifier, base=Unset, /):
    """
    read the version of the package providing `specifier`.

    parameters
    - specifier: absolute ('pkg.module') or relative ('.module') module name.
    - base: anchor package for relative specifiers.

    raises
    - ModuleNotFoundError when the module cannot be located.
    - LookupError when neither a manifest nor distribution metadata carries a version.
    """
    if not isinstance(specifier, str) or not specifier:
        raise TypeError("getversion() first argument must be a non-empty string")
    if base is not Unset and not isinstance(base, str):
        raise TypeError("getversion() second argument must be a string")

    spec = importlib.util.find_spec(specifier, coalesce(base))
    if spec is None:
        raise ModuleNotFoundError("no module named %r" % specifier, name=specifier)

    if spec.has_location and spec.origin and (manifest := _manifest(spec.origin)) is not None:
        document = await asyncio.to_thread(_read, manifest)
        try:
            version = document["project"]["version"]
        except KeyError:
            pass
        else:
            if isinstance(version, str):
                return version

    try:
        return _distribution(spec.name)
    except importlib.metadata.PackageNotFoundError:
        raise LookupError("no version found for %r" % specifier) from None


__all__ = (
    "getversion",
)
