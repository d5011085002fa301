import glob
import os

from config import OUTPUT_EXTENSION
from utils.errors import ConfigurationError
from utils.logger import logger


def clear_output(output_dir, extension=OUTPUT_EXTENSION):
    """
    Makes sure the output directory exists and holds no artifact from a
    previous run.
    """
    if not os.path.isdir(output_dir):
        try:
            os.makedirs(output_dir, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(f'Directory "{output_dir}" was not created') from e
        return

    removed = 0
    for path in glob.glob(os.path.join(output_dir, f"*.{extension}")):
        os.remove(path)
        removed += 1
    if removed:
        logger.debug(f"Removed {removed} previous artifact(s) from {output_dir}")


def build_output_filename(chain, extension=OUTPUT_EXTENSION):
    return f"post_{len(chain)}_{chain[0]}.{extension}"


def render_thread(chain, statuses, include_source_link=False):
    blocks = []
    if include_source_link:
        root = statuses[chain[0]]
        blocks.append(f'<a href="{root.get("uri")}">({root.get("created_at")})</a><br>')
    for status_id in chain:
        blocks.append(statuses[status_id].get('content') or '')
    return "\n\n".join(blocks)


def materialize(threads, statuses, output_dir, extension=OUTPUT_EXTENSION, include_source_link=False):
    """
    Writes one file per thread and returns the written paths.
    """
    written = []
    for chain in threads.values():
        filename = os.path.join(output_dir, build_output_filename(chain, extension))
        with open(filename, 'w', encoding='utf-8') as f:
            f.write(render_thread(chain, statuses, include_source_link=include_source_link))
        written.append(filename)

    logger.log(f"Saved {len(written)} thread(s) to {output_dir}")
    return written
