"""Command line interface for vencode."""
import sys
from functools import wraps
from pathlib import Path

import click

from . import default_config as defaults
from .batch import BatchWalker, Outcome, summarize
from .chapters import build_chapter_metadata, read_clip_list, render_concat_list
from .config import load_options
from .core.base import FFmpegBackend
from .core.video.errors import TranscodeError
from .core.video.scaling import detect_scale
from .encoder import VideoEncoder
from .utils import load_source, setup_logging
from .validation import is_valid_media

_ENCODE_OPTIONS = [
    click.option('-force-original-ar', '--force-original-ar', 'force_original_ar', is_flag=True,
                 help="Display with the stored aspect ratio, ignoring the DAR flag"),
    click.option('-max-width', '--max-width', 'max_width', type=int, help="Maximum output width"),
    click.option('-max-height', '--max-height', 'max_height', type=int,
                 help="Maximum output height"),
    click.option('-crop', '--crop', 'crop', is_flag=True, help="Detect and crop black bars"),
    click.option('-denoise', '--denoise', 'denoise',
                 help="weakest, weak, medium, strong or a:b:c:d"),
    click.option('-modulus', '--modulus', 'modulus', type=int,
                 help="Output dimension alignment (2, 4, 8 or 16)"),
    click.option('-threads', '--threads', 'threads', type=int, help="Encoder threads"),
    click.option('-opencl', '--opencl', 'opencl', is_flag=True,
                 help="Enable x264 OpenCL lookahead"),
    click.option('-crf', '--crf', 'crf', type=int, help="x264 constant rate factor"),
    click.option('-video-bitrate', '--video-bitrate', 'video_bitrate', type=int,
                 help="Video bitrate in kbit/s, overrides -crf"),
    click.option('-preset', '--preset', 'preset', help="x264 preset"),
    click.option('-profile', '--profile', 'profile', help="H.264 profile"),
    click.option('-tune', '--tune', 'tune', help="x264 tune"),
    click.option('-level', '--level', 'level', help="H.264 level"),
    click.option('-audio-bitrate', '--audio-bitrate', 'audio_bitrate', type=int,
                 help="AAC bitrate in kbit/s, 0 copies the source audio"),
    click.option('-twopass', '--twopass', 'two_pass', is_flag=True,
                 help="Two-pass encode (needs -video-bitrate)"),
    click.option('-print-command', '--print-command', 'print_command', is_flag=True,
                 help="Print the ffmpeg commands instead of running them"),
]


def encode_options(func):
    """Attach the shared encode flags to a command."""
    for option in reversed(_ENCODE_OPTIONS):
        func = option(func)
    return func


def logging_options(func):
    """Attach ``-v/--verbose`` and ``--log-file`` and configure logging."""
    @click.option('-v', '--verbose', is_flag=True, help="Debug logging")
    @click.option('--log-file', type=click.Path(dir_okay=False, path_type=Path),
                  help="Also write the log to this file")
    @wraps(func)
    def wrapper(*args, verbose: bool, log_file, **kwargs):
        setup_logging("DEBUG" if verbose else None, log_file)
        return func(*args, **kwargs)
    return wrapper


def _fail(error: TranscodeError) -> None:
    click.echo(f"Error: {error.message}", err=True)
    sys.exit(1)


@click.command()
@click.argument('input_path', type=click.Path(path_type=Path))
@click.argument('output_path', required=False, type=click.Path(path_type=Path))
@encode_options
@logging_options
def main(input_path: Path, output_path: Path, **raw) -> None:
    """Encode INPUT_PATH to H.264/AAC MP4.

    OUTPUT_PATH defaults to <name>-encoded.mp4 beside the input.
    """
    try:
        options = load_options(**raw)
        result = VideoEncoder(options, FFmpegBackend()).encode(input_path, output_path)
    except TranscodeError as e:
        _fail(e)
    if not result.dry_run:
        click.echo(str(result.job.output_path))


@click.command(context_settings={'ignore_unknown_options': True})
@click.argument('passthrough', nargs=-1, type=click.UNPROCESSED)
@encode_options
def _passthrough_options(passthrough, **raw):
    if passthrough:
        raise click.UsageError(f"Unexpected arguments: {' '.join(passthrough)}")
    return load_options(**raw)


@click.command(context_settings={'ignore_unknown_options': True})
@click.argument('source_dir', type=click.Path(path_type=Path))
@click.argument('dest_dir', type=click.Path(path_type=Path))
@click.option('--copy-invalid', is_flag=True,
              help="Copy files without both video and audio instead of skipping them")
@click.argument('encode_args', nargs=-1, type=click.UNPROCESSED)
@logging_options
def batch(source_dir: Path, dest_dir: Path, copy_invalid: bool, encode_args) -> None:
    """Mirror SOURCE_DIR into DEST_DIR, encoding every valid media file.

    Encode flags for every file follow a ``--`` separator.
    """
    try:
        options = _passthrough_options.main(
            args=list(encode_args),
            prog_name="vencode-batch",
            standalone_mode=False
        )
        walker = BatchWalker(source_dir, dest_dir, options, copy_invalid=copy_invalid,
                             backend=FFmpegBackend(), show_progress=True)
        tasks = walker.run()
    except TranscodeError as e:
        _fail(e)

    for task in tasks:
        if task.outcome is Outcome.FAILED:
            click.echo(f"Failed: {task.relative_path}: {task.error}", err=True)
    counts = summarize(tasks)
    click.echo(" ".join(f"{outcome.value}={counts[outcome]}" for outcome in Outcome))


@click.command()
@click.argument('path', type=click.Path(path_type=Path))
@logging_options
def validate(path: Path) -> None:
    """Print PATH and exit 0 if it has both video and audio, else exit 1."""
    backend = FFmpegBackend()
    try:
        backend.ensure_available()
    except TranscodeError as e:
        _fail(e)
    if not is_valid_media(path, backend):
        sys.exit(1)
    click.echo(str(path))


@click.command()
@click.argument('path', type=click.Path(path_type=Path))
@click.option('-w', '--max-width', 'max_width', type=int, help="Maximum output width")
@click.option('-h', '--max-height', 'max_height', type=int, help="Maximum output height")
@click.option('-modulus', '--modulus', 'modulus', type=int, default=defaults.MODULUS, show_default=True,
              help="Output dimension alignment")
@logging_options
def scale(path: Path, max_width, max_height, modulus: int) -> None:
    """Print the scale box W:H:X:Y for PATH."""
    backend = FFmpegBackend()
    try:
        backend.ensure_available()
        media = load_source(path, backend)
        target = detect_scale(media.width, media.height, media.pixel_aspect,
                              max_width=max_width, max_height=max_height, modulus=modulus)
    except TranscodeError as e:
        _fail(e)
    click.echo(str(target))


@click.command()
@click.argument('clip_list', type=click.File('r'), default='-')
@click.option('--concat-list', type=click.Path(dir_okay=False, path_type=Path),
              help="Also write an ffconcat list for joining the clips")
@logging_options
def chapters(clip_list, concat_list) -> None:
    """Print FFMETADATA chapters for the clips listed in CLIP_LIST (one per line)."""
    clips = read_clip_list(clip_list)
    backend = FFmpegBackend()
    try:
        backend.ensure_available()
        metadata = build_chapter_metadata(clips, backend)
    except TranscodeError as e:
        _fail(e)
    if concat_list:
        concat_list.write_text(render_concat_list(clips))
    click.echo(metadata, nl=False)


if __name__ == '__main__':
    main()
