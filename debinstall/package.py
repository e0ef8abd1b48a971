from dataclasses import dataclass


@dataclass(frozen=True)
class TransactionDetails:
    """Package metadata reported by the package daemon for a local file."""

    package_id: str = ""
    summary: str = ""
    description: str = ""
    url: str = ""
    license: str = ""
    size: str = ""


@dataclass(frozen=True)
class Package:
    """A single installable package file.

    ``id`` is the daemon's composite identifier ``name;version;architecture``,
    possibly followed by further fields. ``name``, ``version`` and
    ``architecture`` are its first three fields, empty when missing.
    """

    path: str
    id: str
    name: str
    version: str
    architecture: str
    summary: str
    description: str
    url: str
    license: str
    size: str

    @classmethod
    def from_details(cls, path: str, details: TransactionDetails) -> "Package":
        parts = details.package_id.split(";")
        name, version, architecture = (parts + ["", "", ""])[:3]

        return cls(
            path=path,
            id=details.package_id,
            name=name,
            version=version,
            architecture=architecture,
            summary=details.summary,
            description=details.description,
            url=details.url,
            license=details.license,
            size=details.size,
        )
