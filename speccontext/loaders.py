"""Document loading utilities for specification files."""

import logging
from pathlib import Path
from typing import List, Union

from langchain_core.documents import Document as LCDocument
from langchain_community.document_loaders import TextLoader

from .errors import DocumentNotFound
from .models import DocumentClass, SpecDocument

logger = logging.getLogger(__name__)


def load_text(path: Union[str, Path], *, autodetect_encoding: bool = False) -> str:
    """
    Load a text file through langchain's TextLoader.

    Args:
        path: File to read
        autodetect_encoding: Fall back to detected encodings if UTF-8 fails

    Returns:
        The file's full text

    Raises:
        DocumentNotFound: If the file does not exist
    """
    path = Path(path)
    if not path.is_file():
        raise DocumentNotFound(str(path))

    docs: List[LCDocument] = TextLoader(
        str(path),
        encoding="utf-8",
        autodetect_encoding=autodetect_encoding,
    ).load()
    return "".join(d.page_content or "" for d in docs)


def load_all_documents(store, doc_class: DocumentClass) -> List[SpecDocument]:
    """
    Load every document of one class from a context store.

    A document that disappears between listing and reading is kept with
    empty content.
    """
    out: List[SpecDocument] = []
    for path in store.list_documents(doc_class):
        try:
            content = store.read_document(doc_class, path, normalize=False)
        except DocumentNotFound:
            logger.warning("Listed %s %s vanished before it was read", doc_class.label, path)
            content = ""
        out.append(SpecDocument(path=path, doc_class=doc_class, content=content))
    return out
