"""
Conversion output bundle: the VMF text plus generated material files.
"""

from __future__ import annotations
import io
import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class OutputBundle:
    """Everything a run produces, held in memory.

    ``assets`` maps a relative path (``materials/rbx/....png``) to file
    bytes, in the order the materials were first used.
    """

    document_name: str
    document_text: str
    assets: Dict[str, bytes] = field(default_factory=dict)

    @property
    def document_bytes(self) -> bytes:
        return self.document_text.encode("utf-8")

    def write_to(self, directory: Union[str, Path],
                 asset_directory: Optional[Union[str, Path]] = None) -> List[Path]:
        """Write the document into ``directory`` and the assets into
        ``asset_directory`` (defaults to ``directory``).

        Returns:
            Paths of all written files, document first
        """
        out_dir = Path(directory)
        out_dir.mkdir(parents=True, exist_ok=True)
        asset_dir = Path(asset_directory) if asset_directory is not None else out_dir

        written = []
        doc_path = out_dir / self.document_name
        doc_path.write_bytes(self.document_bytes)
        written.append(doc_path)

        for rel_path, data in self.assets.items():
            path = asset_dir / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            written.append(path)

        logger.info("Wrote %s and %d asset file(s)", doc_path, len(self.assets))
        return written

    def to_zip(self, target: Union[str, Path, BinaryIO, None] = None) -> bytes:
        """Pack the document and assets into a zip archive.

        The archive is written to ``target`` when given; its bytes are
        returned either way.
        """
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.writestr(_entry(self.document_name), self.document_bytes)
            for rel_path, data in self.assets.items():
                archive.writestr(_entry(rel_path), data)
        data = buffer.getvalue()

        if isinstance(target, (str, Path)):
            Path(target).write_bytes(data)
        elif target is not None:
            target.write(data)
        return data


def _entry(name: str) -> zipfile.ZipInfo:
    # Fixed timestamp keeps archives byte-identical between runs
    info = zipfile.ZipInfo(name, date_time=(1980, 1, 1, 0, 0, 0))
    info.compress_type = zipfile.ZIP_DEFLATED
    return info
