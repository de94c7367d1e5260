"""Context stores: where specification documents live."""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from .errors import DocumentNotFound, InvalidDocumentPath
from .loaders import load_text
from .models import DocumentClass, SpecDocument

logger = logging.getLogger(__name__)

REQUIREMENT_FILENAME_PATTERN = re.compile(r"^R#\d{3}-[a-z0-9\-]+\.req$", re.IGNORECASE)
LEGACY_REQUIREMENT_FILENAME_PATTERN = re.compile(r"^REQ#\d+[_-][a-z0-9_\-]+\.(md|req)$", re.IGNORECASE)
SPEC_FILENAME_PATTERN = re.compile(r"\.spec$", re.IGNORECASE)
DESIGN_SPEC_FILENAME_PATTERN = re.compile(r"\.ds$", re.IGNORECASE)

_REQUIREMENT_NUMBER_RE = re.compile(r"^R#(\d+)", re.IGNORECASE)
_LEGACY_REQUIREMENT_NUMBER_RE = re.compile(r"^REQ#(\d+)", re.IGNORECASE)


class ContextStore(Protocol):
    """What the engine needs from a document store."""

    def list_documents(self, doc_class: DocumentClass) -> List[str]:
        ...

    def read_document(self, doc_class: DocumentClass, path: str, *, normalize: bool = True) -> str:
        ...


def normalize_path(path: str) -> str:
    """Use forward slashes and drop a leading 'specs/' or './specs/'."""
    normalized = path.replace("\\", "/")
    for prefix in ("./specs/", "specs/"):
        if normalized.startswith(prefix):
            return normalized[len(prefix):]
    return normalized


def validate_filename(doc_class: DocumentClass, path: str) -> None:
    """Check a document name against its class naming rules."""
    doc_class = DocumentClass(doc_class)
    if doc_class is DocumentClass.SPEC:
        if not SPEC_FILENAME_PATTERN.search(path):
            raise InvalidDocumentPath(f"Specification files must end with .spec. Received: {path}")
    elif doc_class is DocumentClass.DESIGN_SPEC:
        if not DESIGN_SPEC_FILENAME_PATTERN.search(path):
            raise InvalidDocumentPath(f"Design specification files must end with .ds. Received: {path}")
    else:
        name = Path(path).name
        if REQUIREMENT_FILENAME_PATTERN.match(name):
            return
        if LEGACY_REQUIREMENT_FILENAME_PATTERN.match(name):
            logger.warning(
                "Requirement filename %s matches legacy pattern. Consider migrating to R#XXX-name.req.",
                name,
            )
            return
        raise InvalidDocumentPath(f"Requirement filenames must match R#XXX-name.req. Received: {name}")


def extract_requirement_number(filename: Optional[str]) -> Optional[int]:
    """Number of an R#NNN (or legacy REQ#N) requirement file, if any."""
    name = filename or ""
    match = _REQUIREMENT_NUMBER_RE.match(name) or _LEGACY_REQUIREMENT_NUMBER_RE.match(name)
    return int(match.group(1)) if match else None


class InMemoryContextStore:
    """Dict-backed store for tests and embedding applications."""

    def __init__(self, documents: Optional[Dict[DocumentClass, Dict[str, str]]] = None):
        self._docs: Dict[DocumentClass, Dict[str, str]] = {cls: {} for cls in DocumentClass}
        for doc_class, docs in (documents or {}).items():
            self._docs[DocumentClass(doc_class)].update(docs)

    def list_documents(self, doc_class: DocumentClass) -> List[str]:
        return sorted(self._docs[DocumentClass(doc_class)])

    def read_document(self, doc_class: DocumentClass, path: str, *, normalize: bool = True) -> str:
        key = normalize_path(path) if normalize else path
        try:
            return self._docs[DocumentClass(doc_class)][key]
        except KeyError:
            raise DocumentNotFound(path) from None

    def write_document(self, doc_class: DocumentClass, path: str, content: str) -> None:
        self._docs[DocumentClass(doc_class)][normalize_path(path)] = content or ""

    def delete_document(self, doc_class: DocumentClass, path: str) -> None:
        self._docs[DocumentClass(doc_class)].pop(normalize_path(path), None)


class FileSystemContextStore:
    """
    Stores documents in a workspace directory.

    Layout:
        <workspace>/specs/**/*.spec   specs
        <workspace>/specs/**/*.ds     design specs
        <workspace>/specs/reqs/*      requirements
    """

    def __init__(
        self,
        workspace_dir: Union[str, Path],
        specs_dirname: str = "specs",
        reqs_dirname: str = "reqs",
    ):
        self.workspace_dir = Path(workspace_dir).resolve()
        self.specs_dir = self.workspace_dir / specs_dirname
        self.reqs_dirname = reqs_dirname
        self.reqs_dir = self.specs_dir / reqs_dirname

    def _base_dir(self, doc_class: DocumentClass) -> Path:
        return self.reqs_dir if DocumentClass(doc_class) is DocumentClass.REQUIREMENT else self.specs_dir

    def resolve(self, doc_class: DocumentClass, path: str, *, normalize: bool = True) -> Path:
        """
        Absolute file path for a document; rejects paths escaping the base.

        Paths taken from list_documents are already relative to the base,
        so they are resolved with normalize=False.
        """
        base = self._base_dir(doc_class).resolve()
        relative = normalize_path(path) if normalize else path.replace("\\", "/")
        resolved = (base / relative).resolve()
        if resolved != base and base not in resolved.parents:
            raise InvalidDocumentPath(f"Path {path} escapes base directory {base}")
        return resolved

    def _walk_specs(self) -> List[str]:
        if not self.specs_dir.is_dir():
            return []
        files = []
        for file_path in self.specs_dir.rglob("*"):
            relative = file_path.relative_to(self.specs_dir)
            if self.reqs_dirname in relative.parts or not file_path.is_file():
                continue
            files.append(relative.as_posix())
        return files

    def list_documents(self, doc_class: DocumentClass) -> List[str]:
        doc_class = DocumentClass(doc_class)
        if doc_class is DocumentClass.REQUIREMENT:
            if not self.reqs_dir.is_dir():
                return []
            return sorted(p.name for p in self.reqs_dir.iterdir() if p.is_file())

        pattern = SPEC_FILENAME_PATTERN if doc_class is DocumentClass.SPEC else DESIGN_SPEC_FILENAME_PATTERN
        return sorted(f for f in self._walk_specs() if pattern.search(f))

    def read_document(self, doc_class: DocumentClass, path: str, *, normalize: bool = True) -> str:
        file_path = self.resolve(doc_class, path, normalize=normalize)
        if not file_path.is_file():
            raise DocumentNotFound(path)
        return load_text(file_path)

    def write_document(self, doc_class: DocumentClass, path: str, content: str) -> None:
        doc_class = DocumentClass(doc_class)
        validate_filename(doc_class, normalize_path(path))
        file_path = self.resolve(doc_class, path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content or "", encoding="utf-8")

    def delete_document(self, doc_class: DocumentClass, path: str) -> None:
        self.resolve(doc_class, path).unlink(missing_ok=True)

    def load_vision(self) -> str:
        """Project vision text, or empty if none was written yet."""
        vision = self.specs_dir / "vision.md"
        return load_text(vision) if vision.is_file() else ""

    def next_requirement_number(self) -> int:
        numbers = [
            n for n in map(extract_requirement_number, self.list_documents(DocumentClass.REQUIREMENT))
            if n is not None
        ]
        return max(numbers, default=0) + 1

    def design_specs_for(self, spec_path: str) -> List[SpecDocument]:
        """Design specs whose name extends the spec's base name (foo.spec -> foo.*.ds)."""
        normalized = normalize_path(spec_path)
        base = normalized[:-len(".spec")] if normalized.endswith(".spec") else normalized
        prefix = f"{base}."
        return [
            SpecDocument(
                path=path,
                doc_class=DocumentClass.DESIGN_SPEC,
                content=self.read_document(DocumentClass.DESIGN_SPEC, path, normalize=False),
            )
            for path in self.list_documents(DocumentClass.DESIGN_SPEC)
            if path.startswith(prefix)
        ]
