# Copyright (c) 2025 Red Hat, Inc.
# Copyright Contributors to the Open Cluster Management project

"""
Common Helm chart utilities.
"""

import logging
import os

import yaml

from helm_chart_gen.exceptions import ChartGenerationError


def log_header(message, *args):
    """
    Logs a header message with visual separators and formats the message using multiple arguments.

    Args:
        message (str): The message to be displayed as the header
        *args: Additional arguments to be passed into the message string
    """
    formatted_message = message.format(*args)
    separator = "=" * len(formatted_message)

    logging.info("")
    logging.info(separator)
    logging.info(formatted_message)
    logging.info(separator)


def insert_flow_control_if_around(lines_list, first_line_index, last_line_index, if_condition):
    """
    Insert Helm flow control (if statement) around a block of lines.

    The if/end lines take the indentation of the first wrapped line.

    Args:
        lines_list (list): List of lines (without line endings) to modify
        first_line_index (int): Index of first line to wrap
        last_line_index (int): Index of last line to wrap
        if_condition (str): The condition for the if statement (without {{ }} or if)

    Returns:
        list: Modified list of lines with if/end-if added
    """
    first_line = lines_list[first_line_index]
    indent = first_line[:len(first_line) - len(first_line.lstrip())]

    lines_list.insert(first_line_index, f"{indent}{{{{- if {if_condition} }}}}")
    # +2 accounts for the line inserted above
    lines_list.insert(last_line_index + 2, f"{indent}{{{{- end }}}}")

    return lines_list


def wrap_in_flow_control(content, if_condition):
    """
    Wrap a whole template in a Helm if block.

    The trailing "end" trims the whitespace after it, so the rendered document
    does not gain a blank line when the condition holds.
    """
    return f"{{{{- if {if_condition} }}}}\n{content}{{{{- end -}}}}\n"


def read_text(file_path):
    """Read a file, wrapping any failure with the offending path."""
    try:
        with open(file_path, 'r', encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise ChartGenerationError(f"failed to read {file_path}: {e}", file_path) from e


def write_text(file_path, content):
    """Write content to a file, creating its directory and overwriting any previous content."""
    try:
        os.makedirs(os.path.dirname(file_path) or ".", exist_ok=True)
        with open(file_path, 'w', encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        logging.error("Error writing destination file: %s", file_path)
        raise ChartGenerationError(f"failed to write {file_path}: {e}", file_path) from e


def load_yaml(file_path):
    """Load a single-document YAML file. A missing file yields an empty dict."""
    if not os.path.exists(file_path):
        logging.debug("%s does not exist", file_path)
        return {}

    content = read_text(file_path)
    try:
        return yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ChartGenerationError(f"failed to parse {file_path}: {e}", file_path) from e
