"""Video encoding module."""

import os
import shlex
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import click
import ffmpeg
from loguru import logger

from . import default_config as defaults
from .audio_processor import AudioStrategy, select_audio_options
from .config import EncodeJob, EncodeOptions
from .core.base import FFmpegBackend, MediaBackend
from .core.video.cropping import detect_crop
from .core.video.errors import EncodeError, FatalInputError
from .core.video.filters import FilterChain, FilterStage
from .core.video.scaling import detect_scale
from .core.video.types import SourceMedia
from .utils.validation import load_source
from .work_manager import atomic_output, work_space

DEINTERLACE_FILTER = "yadif=mode=0:parity=-1:deint=1"


class EncodeState(str, Enum):
    """Encoder progress."""
    INIT = "init"
    OPTIONS_BUILT = "options_built"
    FIRST_PASS = "first_pass"
    SECOND_PASS = "second_pass"
    SINGLE_PASS = "single_pass"
    DONE = "done"
    FAILED = "failed"


TRANSITIONS = {
    EncodeState.INIT: {EncodeState.OPTIONS_BUILT, EncodeState.FAILED},
    EncodeState.OPTIONS_BUILT: {
        EncodeState.FIRST_PASS,
        EncodeState.SINGLE_PASS,
        EncodeState.DONE,  # dry run
        EncodeState.FAILED,
    },
    EncodeState.FIRST_PASS: {EncodeState.SECOND_PASS, EncodeState.FAILED},
    EncodeState.SECOND_PASS: {EncodeState.DONE, EncodeState.FAILED},
    EncodeState.SINGLE_PASS: {EncodeState.DONE, EncodeState.FAILED},
    EncodeState.DONE: set(),
    EncodeState.FAILED: set(),
}


@dataclass
class EncodeResult:
    """Outcome of one encode.

    Attributes:
        job: Input, output and options that were used
        state: Final encoder state
        commands: Encoder commands, in the order they ran (or were printed)
        dry_run: Whether the commands were only printed
    """
    job: EncodeJob
    state: EncodeState
    commands: List[List[str]] = field(default_factory=list)
    dry_run: bool = False


def default_output_path(input_path: Path) -> Path:
    """Output beside the input: ``<stem>-encoded.mp4``."""
    return input_path.with_name(
        f"{input_path.stem}{defaults.OUTPUT_SUFFIX}{defaults.OUTPUT_EXTENSION}"
    )


class VideoEncoder:
    """Encode single files with x264 according to a set of options."""

    def __init__(self, options: EncodeOptions, backend: Optional[MediaBackend] = None,
                 echo: Optional[Callable[[str], Any]] = None):
        """Initialize encoder.

        Args:
            options: Encoding options
            backend: Media backend, FFmpegBackend by default
            echo: Output function for printed commands
        """
        self.options = options
        self.backend = backend or FFmpegBackend()
        self.echo = echo or click.echo
        self.state = EncodeState.INIT
        self.history: List[EncodeState] = [EncodeState.INIT]

    def _transition(self, state: EncodeState) -> None:
        if state not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid encoder transition: {self.state.value} -> {state.value}")
        logger.debug(f"Encoder state: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def build_filter_chain(self, media: SourceMedia) -> FilterChain:
        """Build the video filters for a probed source.

        Args:
            media: Probed source

        Returns:
            Filter chain with deinterlace, optional forced DAR, scale,
            optional crop and optional denoise stages
        """
        opts = self.options
        chain = FilterChain()
        chain.set(FilterStage.DEINTERLACE, DEINTERLACE_FILTER)

        aspect = media.pixel_aspect
        if opts.force_original_ar:
            chain.set(FilterStage.FORCED_DAR, f"setdar={media.width}/{media.height}")
            aspect = 1.0

        scale = detect_scale(
            media.width,
            media.height,
            aspect,
            max_width=opts.max_width,
            max_height=opts.max_height,
            modulus=opts.modulus
        )
        chain.set(FilterStage.SCALE, scale.to_filter())

        if opts.crop:
            crop = detect_crop(self.backend, media, scale)
            if crop:
                chain.set(FilterStage.CROP, crop.to_ffmpeg_filter())

        if opts.denoise:
            chain.set(FilterStage.DENOISE, opts.denoise.to_filter())

        return chain

    def _video_options(self, chain: FilterChain) -> Dict[str, Any]:
        opts = self.options
        video: Dict[str, Any] = {
            'c:v': defaults.VIDEO_CODEC,
            'preset': opts.preset,
            'profile:v': opts.profile,
            'level': opts.level,
        }
        if opts.tune:
            video['tune'] = opts.tune
        if opts.video_bitrate:
            video['b:v'] = f"{opts.video_bitrate}k"
        else:
            video['crf'] = opts.crf
        if opts.threads is not None:
            video['threads'] = opts.threads
        if opts.opencl:
            video['x264-params'] = 'opencl=1'
        if chain:
            video['vf'] = chain.render()
        return video

    def _compile(self, input_path: Path, output: Union[str, Path],
                 output_args: Dict[str, Any]) -> List[str]:
        stream = ffmpeg.input(str(input_path))
        return (
            ffmpeg.output(stream, str(output), **output_args)
            .global_args('-hide_banner')
            .compile(cmd=self.backend.ffmpeg, overwrite_output=True)
        )

    def build_commands(self, job: EncodeJob, chain: FilterChain, audio: AudioStrategy,
                       target: Path, passlog: Optional[Path] = None) -> List[List[str]]:
        """Compose the encoder commands for a job.

        Args:
            job: Encode job
            chain: Video filter chain
            audio: Selected audio strategy
            target: File the final pass writes
            passlog: Pass log prefix; a first pass is added when set

        Returns:
            One command per pass
        """
        video = self._video_options(chain)
        commands = []

        if passlog is not None:
            first_pass = dict(video, **{'pass': 1, 'passlogfile': str(passlog), 'an': None,
                                        'format': 'null'})
            commands.append(self._compile(job.input_path, os.devnull, first_pass))
            video = dict(video, **{'pass': 2, 'passlogfile': str(passlog)})

        final_pass = dict(video, **audio.options)
        final_pass.update(movflags='+faststart', format=defaults.OUTPUT_FORMAT)
        commands.append(self._compile(job.input_path, target, final_pass))
        return commands

    def _prepare(self, input_path: Union[str, Path],
                 output_path: Union[str, Path, None]) -> Tuple[EncodeJob, FilterChain, AudioStrategy]:
        self.backend.ensure_available()
        input_path = Path(input_path)
        output_path = Path(output_path) if output_path else default_output_path(input_path)
        if output_path.resolve() == input_path.resolve():
            raise FatalInputError(f"Output would overwrite the input: {input_path}")

        media = load_source(input_path, self.backend)
        logger.info(
            f"Source {input_path.name}: {media.width}x{media.height}, "
            f"audio={'yes' if media.has_audio else 'no'}"
        )

        chain = self.build_filter_chain(media)
        audio = select_audio_options(self.backend, self.options.audio_bitrate)
        job = EncodeJob(input_path=input_path, output_path=output_path, options=self.options)
        self._transition(EncodeState.OPTIONS_BUILT)
        return job, chain, audio

    def _run_pass(self, state: EncodeState, cmd: List[str], job: EncodeJob) -> None:
        self._transition(state)
        logger.info(f"{state.value.replace('_', ' ').capitalize()}: {job.input_path.name}")
        logger.debug(f"FFmpeg command: {shlex.join(cmd)}")
        returncode = self.backend.run(cmd)
        if returncode != 0:
            self._transition(EncodeState.FAILED)
            raise EncodeError(
                f"Encoding {job.input_path} failed with exit code {returncode}",
                cmd=cmd,
                returncode=returncode
            )

    def encode(self, input_path: Union[str, Path],
               output_path: Union[str, Path, None] = None) -> EncodeResult:
        """Encode one file.

        Args:
            input_path: Source file
            output_path: Destination, ``<stem>-encoded.mp4`` beside the
                source when omitted

        Returns:
            Encode result with the final state and the commands used

        Raises:
            FatalConfigError: If ffmpeg or ffprobe is missing
            FatalInputError: If the source is unusable
            ProbeError: If the source cannot be probed
            EncodeError: If the encoder exits with a non-zero status
        """
        self.state = EncodeState.INIT
        self.history = [EncodeState.INIT]
        try:
            return self._encode(input_path, output_path)
        except Exception:
            if self.state is not EncodeState.FAILED:
                self._transition(EncodeState.FAILED)
            raise

    def _encode(self, input_path: Union[str, Path],
                output_path: Union[str, Path, None]) -> EncodeResult:
        job, chain, audio = self._prepare(input_path, output_path)

        two_pass = self.options.uses_two_pass
        if self.options.two_pass and not two_pass:
            logger.debug("Two-pass needs a video bitrate; running a single pass")

        if self.options.print_command:
            passlog = None
            if two_pass:
                passlog = Path(tempfile.gettempdir()) / f"{job.output_path.stem}-x264"
            commands = self.build_commands(job, chain, audio, job.output_path, passlog)
            for cmd in commands:
                self.echo(shlex.join(cmd))
            self._transition(EncodeState.DONE)
            return EncodeResult(job, self.state, commands, dry_run=True)

        with work_space() as work_dir:
            passlog = work_dir / "x264" if two_pass else None
            with atomic_output(job.output_path) as target:
                commands = self.build_commands(job, chain, audio, target, passlog)
                if two_pass:
                    self._run_pass(EncodeState.FIRST_PASS, commands[0], job)
                    self._run_pass(EncodeState.SECOND_PASS, commands[1], job)
                else:
                    self._run_pass(EncodeState.SINGLE_PASS, commands[0], job)

        self._transition(EncodeState.DONE)
        logger.info(f"Encoded {job.input_path.name} -> {job.output_path}")
        return EncodeResult(job, self.state, commands)
