"""Mirror a source tree into a destination tree, encoding what can be encoded."""

import shutil
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

from loguru import logger
from tqdm import tqdm

from .config import EncodeOptions
from .core.base import FFmpegBackend, MediaBackend
from .core.video.errors import FatalConfigError, FatalInputError
from .encoder import VideoEncoder
from .validation import is_valid_media
from .work_manager import atomic_output


class Outcome(str, Enum):
    """What happened to one file."""
    COPIED = "copied"
    ENCODED = "encoded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class BatchTask:
    """One source file and its mirrored destination.

    Attributes:
        source: Absolute source path
        destination: Absolute destination path
        relative_path: Path relative to both roots
        outcome: Result, None until processed
        error: Failure or skip reason
    """
    source: Path
    destination: Path
    relative_path: Path
    outcome: Optional[Outcome] = None
    error: Optional[str] = None


def summarize(tasks: List[BatchTask]) -> Dict[Outcome, int]:
    """Count tasks per outcome (every outcome is present in the result)."""
    counts = Counter(task.outcome for task in tasks)
    return {outcome: counts.get(outcome, 0) for outcome in Outcome}


class BatchWalker:
    """Walk a source directory and mirror it into a destination directory."""

    def __init__(self, source_dir: Union[str, Path], dest_dir: Union[str, Path],
                 options: EncodeOptions, copy_invalid: bool = False,
                 backend: Optional[MediaBackend] = None,
                 encoder: Optional[VideoEncoder] = None,
                 show_progress: bool = False):
        """Initialize walker.

        Args:
            source_dir: Tree to read
            dest_dir: Tree to write
            options: Options passed through to every encode
            copy_invalid: Copy files without video and audio verbatim
                instead of skipping them
            backend: Media backend, FFmpegBackend by default
            encoder: Encoder to use, built from options and backend by default
            show_progress: Show a progress bar
        """
        self.source_dir = Path(source_dir).resolve()
        self.dest_dir = Path(dest_dir).resolve()
        self.options = options
        self.copy_invalid = copy_invalid
        self.backend = backend or FFmpegBackend()
        self.encoder = encoder or VideoEncoder(options, self.backend)
        self.show_progress = show_progress

    def check_structure(self) -> None:
        """Validate the source and destination roots.

        Raises:
            FatalInputError: If the roots cannot be used
        """
        if not self.source_dir.is_dir():
            raise FatalInputError(f"Source is not a directory: {self.source_dir}")
        if self.dest_dir.exists() and not self.dest_dir.is_dir():
            raise FatalInputError(f"Destination exists and is not a directory: {self.dest_dir}")
        if self.source_dir == self.dest_dir:
            raise FatalInputError(f"Source and destination are the same: {self.source_dir}")

    def collect(self) -> List[BatchTask]:
        """List every regular file under the source, in sorted order."""
        tasks = []
        for path in sorted(self.source_dir.rglob('*')):
            if path.is_symlink() or not path.is_file():
                continue
            # Destination nested inside the source
            if self.dest_dir in path.parents:
                continue
            relative = path.relative_to(self.source_dir)
            tasks.append(BatchTask(source=path, destination=self.dest_dir / relative,
                                   relative_path=relative))
        return tasks

    def run(self) -> List[BatchTask]:
        """Process every file; per-file failures are recorded, not raised.

        Returns:
            One task per source file, each with an outcome

        Raises:
            FatalInputError: If the roots are unusable
            FatalConfigError: If the encoder binaries are missing
        """
        self.check_structure()
        self.backend.ensure_available()
        tasks = self.collect()
        logger.info(f"Found {len(tasks)} files in {self.source_dir}")
        self.dest_dir.mkdir(parents=True, exist_ok=True)

        for task in tqdm(tasks, desc="Batch", unit="file", disable=not self.show_progress):
            self._process(task)

        counts = summarize(tasks)
        logger.info(
            "Batch finished: " + ", ".join(f"{counts[o]} {o.value}" for o in Outcome)
        )
        return tasks

    def _process(self, task: BatchTask) -> None:
        logger.info(f"Processing {task.relative_path}")
        try:
            task.outcome = self._handle(task)
        except FatalConfigError:
            raise
        except Exception as e:
            task.outcome = Outcome.FAILED
            task.error = str(e)
            logger.error(f"Failed to process {task.source}: {e}")
        logger.info(f"Finished {task.relative_path}: {task.outcome.value}")

    def _handle(self, task: BatchTask) -> Outcome:
        if task.destination.exists():
            task.error = "destination exists"
            return Outcome.SKIPPED

        if not is_valid_media(task.source, self.backend):
            if not self.copy_invalid:
                task.error = "no video and audio streams"
                return Outcome.SKIPPED
            with atomic_output(task.destination) as target:
                shutil.copy2(task.source, target)
            return Outcome.COPIED

        task.destination.parent.mkdir(parents=True, exist_ok=True)
        self.encoder.encode(task.source, task.destination)
        return Outcome.ENCODED
