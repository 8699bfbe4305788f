"""Shared fixtures: EPUB builders, configs and seeded random sources."""

import random
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

from learnfeed.config import AppConfig, StorageConfig
from learnfeed.models.book import Book, Chapter

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

CHAPTER_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<html xmlns="http://www.w3.org/1999/xhtml">
<head><title>{title}</title><style>p {{ color: red; }}</style></head>
<body>{body}</body>
</html>
"""

LONG_PARAGRAPH = (
    "<p>Habits are the compound interest of self-improvement. "
    "Small changes often appear to make no difference until you cross a critical threshold. "
    "You should focus on systems instead of goals if you want lasting progress. "
    "The most effective way to change your habits is to focus on who you wish to become.</p>"
)

EpubFactory = Callable[..., Path]


def build_epub(
    path: Path,
    title: str | None = "Atomic Notes",
    author: str | None = "Jane Writer",
    chapters: list[tuple[str, str, str]] | None = None,
    missing: tuple[str, ...] = (),
    with_ncx: bool = True,
    compression: int = zipfile.ZIP_STORED,
) -> Path:
    """Write a minimal EPUB 2 container.

    Args:
        path: Output file.
        title: dc:title, omitted when None.
        author: dc:creator, omitted when None.
        chapters: (item id, toc title, body markup) triples in spine order.
        missing: Item ids declared in the manifest and spine without a file.
        with_ncx: Whether to include a toc.ncx table of contents.
        compression: zipfile compression method for the archive members.
    """
    if chapters is None:
        chapters = [("ch1", "The Surprising Power", LONG_PARAGRAPH)]

    metadata = ""
    if title is not None:
        metadata += f"<dc:title>{title}</dc:title>"
    if author is not None:
        metadata += f"<dc:creator>{author}</dc:creator>"

    ids = [item_id for item_id, _, _ in chapters] + list(missing)
    manifest = "".join(
        f'<item id="{item_id}" href="text/{item_id}.xhtml" media-type="application/xhtml+xml"/>'
        for item_id in ids
    )
    if with_ncx:
        manifest += '<item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>'
    spine = "".join(f'<itemref idref="{item_id}"/>' for item_id in ids)
    toc_attr = ' toc="ncx"' if with_ncx else ""

    opf = f"""<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="2.0">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">{metadata}</metadata>
  <manifest>{manifest}</manifest>
  <spine{toc_attr}>{spine}</spine>
</package>
"""

    nav_points = "".join(
        f'<navPoint id="np{i}" playOrder="{i + 1}"><navLabel><text>{toc_title}</text></navLabel>'
        f'<content src="text/{item_id}.xhtml#start"/></navPoint>'
        for i, (item_id, toc_title, _) in enumerate(chapters)
    )
    ncx = f"""<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <navMap>{nav_points}</navMap>
</ncx>
"""

    with zipfile.ZipFile(path, "w", compression=compression) as archive:
        archive.writestr("mimetype", "application/epub+zip")
        archive.writestr("META-INF/container.xml", CONTAINER_XML)
        archive.writestr("OEBPS/content.opf", opf)
        if with_ncx:
            archive.writestr("OEBPS/toc.ncx", ncx)
        for item_id, toc_title, body in chapters:
            archive.writestr(
                f"OEBPS/text/{item_id}.xhtml",
                CHAPTER_TEMPLATE.format(title=toc_title, body=body),
            )
    return path


@pytest.fixture
def make_epub(tmp_path: Path) -> EpubFactory:
    def _make(name: str = "book.epub", directory: Path | None = None, **kwargs: object) -> Path:
        target = (directory or tmp_path) / name
        target.parent.mkdir(parents=True, exist_ok=True)
        return build_epub(target, **kwargs)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        storage=StorageConfig(
            books_dir=str(tmp_path / "books"),
            data_dir=str(tmp_path / "data"),
            sqlite_path=str(tmp_path / "db" / "corpus.db"),
        )
    )


@pytest.fixture
def sample_book() -> Book:
    return Book(
        title="Atomic Notes",
        author="Jane Writer",
        chapters=[
            Chapter(
                chapter_id="ch1",
                title="The Surprising Power",
                order=0,
                content=(
                    "Habits are the compound interest of self-improvement. "
                    "Small changes often appear to make no difference at first. "
                    "You should always focus on systems instead of goals. "
                    "The most effective way to change is to focus on identity. "
                    "Every action you take is a vote for the person you wish to become."
                ),
            ),
            Chapter(
                chapter_id="ch2",
                title="How Habits Shape Identity",
                order=2,
                content=(
                    "Improvements are only temporary until they become part of who you are. "
                    "The key principle is that behavior follows belief over the long run."
                ),
            ),
        ],
    )
