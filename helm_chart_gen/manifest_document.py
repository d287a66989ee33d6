# Copyright (c) 2025 Red Hat, Inc.
# Copyright Contributors to the Open Cluster Management project

"""
Line-level editing of manifest files anchored on YAML nodes.

The generated templates contain Helm actions and therefore are no longer valid
YAML, so the chart is produced by splicing lines into the source text. The
splice points are taken from the node tree PyYAML composes out of the source,
which keeps the edits on the intended keys of every document in the file.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

import yaml
from yaml.nodes import MappingNode, ScalarNode, SequenceNode

NULL_TAG = "tag:yaml.org,2002:null"


@dataclass
class KeyPosition:
    """Where a mapping key sits in the source and where its value ends"""
    line: int
    column: int
    child_indent: int
    last_line: int
    # True when new child keys can be added on the lines after the key
    block: bool = True


@dataclass
class DocumentNodes:
    first_line: int
    last_line: int
    kind: Optional[str] = None
    name: Optional[str] = None
    metadata: Optional[KeyPosition] = None
    spec: Optional[KeyPosition] = None
    annotations: Optional[KeyPosition] = None
    labels: List[KeyPosition] = field(default_factory=list)
    has_namespace: bool = False


def _last_line(node):
    if isinstance(node, MappingNode) and node.value:
        return _last_line(node.value[-1][1])
    if isinstance(node, SequenceNode) and node.value:
        return _last_line(node.value[-1])
    end = node.end_mark
    # Block scalars end at the start of the following line
    if end.column == 0 and end.line > node.start_mark.line:
        return end.line - 1
    return end.line


def _is_empty(node):
    return isinstance(node, ScalarNode) and node.tag == NULL_TAG and node.value == ""


def _key_position(key_node, value_node):
    column = key_node.start_mark.column
    line = key_node.start_mark.line

    if _is_empty(value_node):
        return KeyPosition(line, column, column + 2, line)

    last_line = max(line, _last_line(value_node))
    if isinstance(value_node, MappingNode) and not value_node.flow_style:
        child_indent = value_node.value[0][0].start_mark.column if value_node.value else column + 2
        return KeyPosition(line, column, child_indent, last_line, value_node.start_mark.line > line)

    return KeyPosition(line, column, column + 2, last_line, block=False)


def _find_key(mapping_node, key):
    if not isinstance(mapping_node, MappingNode):
        return None, None
    for key_node, value_node in mapping_node.value:
        if isinstance(key_node, ScalarNode) and key_node.value == key:
            return key_node, value_node
    return None, None


def _scalar(node):
    if isinstance(node, ScalarNode):
        return node.value
    return None


def _document_nodes(root):
    nodes = DocumentNodes(first_line=root.start_mark.line, last_line=_last_line(root))

    _, kind_node = _find_key(root, "kind")
    nodes.kind = _scalar(kind_node)

    metadata_key, metadata_value = _find_key(root, "metadata")
    if metadata_key is not None:
        nodes.metadata = _key_position(metadata_key, metadata_value)
        _, name_node = _find_key(metadata_value, "name")
        nodes.name = _scalar(name_node)
        namespace_key, _ = _find_key(metadata_value, "namespace")
        nodes.has_namespace = namespace_key is not None

        annotations_key, annotations_value = _find_key(metadata_value, "annotations")
        if annotations_key is not None:
            nodes.annotations = _key_position(annotations_key, annotations_value)

        labels_key, labels_value = _find_key(metadata_value, "labels")
        if labels_key is not None:
            # Labels can only be dropped as whole lines of a block mapping
            if nodes.metadata.block and labels_key.start_mark.line != metadata_key.start_mark.line:
                nodes.labels.append(_key_position(labels_key, labels_value))
            else:
                logging.warning("Keeping labels of flow-style metadata at line %d",
                                metadata_key.start_mark.line + 1)

    spec_key, spec_value = _find_key(root, "spec")
    if spec_key is not None:
        nodes.spec = _key_position(spec_key, spec_value)

    return nodes


LABELS_LINE = re.compile(r'^  labels:\s*$')
LABEL_ENTRY_LINE = re.compile(r'^    \S')
KIND_LINE = re.compile(r'^kind:\s*(\S+)')
NAME_LINE = re.compile(r'^  name:\s*(\S+)')


def _textual_key(lines, key):
    for index, line in enumerate(lines):
        stripped = line.lstrip()
        if stripped.startswith(key + ":"):
            column = len(line) - len(stripped)
            return KeyPosition(index, column, column + 2, index)
    return None


def _textual_nodes(lines):
    """Best-effort anchors for text PyYAML cannot compose: first occurrence of each key."""
    nodes = DocumentNodes(first_line=0, last_line=max(len(lines) - 1, 0))
    nodes.metadata = _textual_key(lines, "metadata")
    nodes.spec = _textual_key(lines, "spec")
    nodes.annotations = _textual_key(lines, "annotations")
    nodes.has_namespace = any(line.startswith("  namespace:") for line in lines)

    for line in lines:
        match = KIND_LINE.match(line)
        if match and nodes.kind is None:
            nodes.kind = match.group(1)
        match = NAME_LINE.match(line)
        if match and nodes.name is None:
            nodes.name = match.group(1)

    index = 0
    while index < len(lines):
        if LABELS_LINE.match(lines[index]):
            end = index
            while end + 1 < len(lines) and LABEL_ENTRY_LINE.match(lines[end + 1]):
                end += 1
            nodes.labels.append(KeyPosition(index, 2, 4, end))
            index = end
        index += 1

    return nodes


class ManifestDocument:
    """
    Source lines of a manifest file plus the pending edits on them.

    Blocks inserted after the same line are stacked so that the most recent
    insertion sits right below that line.
    """

    def __init__(self, content, source=""):
        self.source = source
        self.lines = content.splitlines(keepends=True)
        self._inserts = {}
        self._removed = set()
        self.structural = True
        self.documents = self._locate_documents(content)

    def _locate_documents(self, content):
        try:
            roots = list(yaml.compose_all(content, Loader=yaml.SafeLoader))
        except yaml.YAMLError as e:
            logging.warning("Could not parse %s as YAML, editing first occurrences of keys instead: %s",
                            self.source or "manifest", e)
            self.structural = False
            return [_textual_nodes(self.lines)]

        return [_document_nodes(root) for root in roots if isinstance(root, MappingNode)]

    def text(self, document=None):
        """Current text of one document, or of the whole file"""
        if document is None:
            return "".join(self.lines)
        return "".join(self.lines[document.first_line:document.last_line + 1])

    def replace(self, old, new, count=-1):
        """Replace text on the source lines. Neither string may span lines."""
        if "\n" in old or "\n" in new:
            raise ValueError("replacements must not span lines")
        replaced = "".join(self.lines).replace(old, new, count)
        self.lines = replaced.splitlines(keepends=True)

    def insert_after(self, line_index, block, indent=0):
        """Insert lines below a source line, indenting every non-empty one."""
        padding = " " * indent
        indented = [padding + line if line.strip() else line for line in block]
        self._inserts.setdefault(line_index, []).append(indented)

    def insert_child(self, position, block):
        """Insert block as the first entries of the mapping under a key."""
        if not position.block:
            logging.warning("Cannot insert below flow-style key at line %d of %s",
                            position.line + 1, self.source or "manifest")
            return False
        self.insert_after(position.line, block, position.child_indent)
        return True

    def remove(self, position):
        """Drop a key and its whole value."""
        self._removed.update(range(position.line, position.last_line + 1))

    def render(self):
        output = []
        for index, line in enumerate(self.lines):
            if index not in self._removed:
                output.append(line)
            blocks = self._inserts.get(index)
            if not blocks:
                continue
            if output and not output[-1].endswith("\n"):
                output[-1] += "\n"
            for block in reversed(blocks):
                output.extend(block_line + "\n" for block_line in block)
        return "".join(output)
