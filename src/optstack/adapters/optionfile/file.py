"""Ini-style option files as option sources.

Contents:
    * :class:`Section` - values of one ``[section]`` of a file.
    * :class:`OptionFile` - reads, parses, queries and rewrites an option file.

System Role:
    Adapter between the filesystem and the domain resolver. Parsing uses the
    domain line grammar and validates each key against the options reachable
    from a :class:`~optstack.domain.config.Config`; a parsed file then serves
    as an option source for that Config.

Lifecycle:
    unread -> read -> parsed. Ignore/limit filters may only change before
    parsing; the selected sections may change at any time afterwards.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from optstack.domain.config import Config
from optstack.domain.errors import (
    FileParseFormatError,
    FileStateError,
    MissingSectionError,
    OptionMissingValueError,
    OptionNotDefinedError,
)
from optstack.domain.lines import LineKind, LineSyntaxError, parse_line
from optstack.domain.option import Option
from optstack.domain.quoting import EMPTY_SENTINEL

logger = logging.getLogger(__name__)

_BOM = "\ufeff"


def _empty_values() -> dict[str, str]:
    return {}


def _empty_opts() -> dict[str, Option]:
    return {}


@dataclass(slots=True)
class Section:
    """Labeled group of option values. The unnamed preamble has name ``""``.

    Attributes:
        name: Section name without brackets.
        values: Normalized option name to raw value.
        opts: Option definition each value was validated against, if known.
    """

    name: str
    values: dict[str, str] = field(default_factory=_empty_values)
    opts: dict[str, Option] = field(default_factory=_empty_opts)


class OptionFile:
    """An ini-style option file.

    Lines may hold ``[section]`` headers, ``name=value`` pairs, bare names
    (usually booleans), or comments.

    Attributes:
        ignore_unknown_options: Skip unknown options instead of failing.

    Example:
        >>> f = OptionFile("/etc", "tool.cnf")
        >>> str(f.path)
        '/etc/tool.cnf'
        >>> f.parsed
        False
    """

    def __init__(self, *path_parts: str | os.PathLike[str], ignore_unknown_options: bool = False) -> None:
        self._path = Path(os.path.abspath(Path(*path_parts)))
        self.ignore_unknown_options = ignore_unknown_options
        preamble = Section("")
        self._sections: list[Section] = [preamble]
        self._section_index: dict[str, Section] = {"": preamble}
        self._contents = ""
        self._read = False
        self._parsed = False
        self._selected: list[str] = []
        self._ignored_names: set[str] = set()
        self._only_names: set[str] = set()

    @property
    def path(self) -> Path:
        """Absolute path of the file."""
        return self._path

    @property
    def dir(self) -> Path:
        return self._path.parent

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def parsed(self) -> bool:
        return self._parsed

    @property
    def selected(self) -> tuple[str, ...]:
        """Section names consulted by :meth:`option_value`, highest priority first."""
        return tuple(self._selected)

    @property
    def sections(self) -> tuple[Section, ...]:
        return tuple(self._sections)

    def __str__(self) -> str:
        return str(self._path)

    def __repr__(self) -> str:
        return f"OptionFile({str(self._path)!r})"

    def exists(self) -> bool:
        return self._path.exists()

    def read(self) -> None:
        """Load the file's text without parsing it.

        Raises:
            OSError: The file cannot be read.
        """
        self._contents = self._path.read_text(encoding="utf-8")
        self._read = True

    def load_text(self, text: str) -> None:
        """Use ``text`` as the file's contents instead of reading from disk."""
        self._contents = text
        self._read = True

    def parse(self, config: Config) -> None:
        """Parse the contents into sections, reading from disk first if needed.

        Option names are validated against every option reachable from
        ``config``, so that a file may set options belonging to sub-commands
        other than the one being run.

        Raises:
            FileParseFormatError: A line is malformed.
            OptionNotDefinedError: An unknown option is set without ``loose-``
                and unknown options are not being ignored.
            OptionMissingValueError: A value-required option appears bare.
            OSError: The file cannot be read.
        """
        if not self._read:
            self.read()

        section = self._section_index[""]
        contents = self._contents.removeprefix(_BOM)
        for line_number, raw_line in enumerate(contents.split("\n"), start=1):
            try:
                parsed = parse_line(raw_line.removesuffix("\r"))
            except LineSyntaxError as exc:
                raise FileParseFormatError(str(exc), str(self._path), line_number) from exc

            if parsed.kind is LineKind.SECTION_HEADER:
                section = self._get_or_create_section(parsed.section_name)
                continue
            if parsed.kind not in (LineKind.KEY_ONLY, LineKind.KEY_VALUE) or not parsed.key:
                continue
            if self._is_filtered(parsed.key):
                logger.debug("Dropping filtered option %s in %s line %d", parsed.key, self._path, line_number)
                continue

            location = f"{self._path} line {line_number}"
            option = config.find_option(parsed.key)
            if option is None:
                if parsed.is_loose or self.ignore_unknown_options or config.loose_file_options:
                    logger.debug("Skipping unknown option %s at %s", parsed.key, location)
                    continue
                raise OptionNotDefinedError(parsed.key, location)

            value = parsed.value
            if parsed.kind is LineKind.KEY_ONLY:
                if option.require_value:
                    raise OptionMissingValueError(option.name, location)
                if option.is_bool:
                    value = "1"
            elif value == "" and not option.is_bool:
                # keeps "foo=" distinguishable from bare "foo" through get_raw
                value = EMPTY_SENTINEL

            section.values[parsed.key] = value
            section.opts[parsed.key] = option

        self._parsed = True
        self._selected = [""]
        logger.debug("Parsed option file %s into %d sections", self._path, len(self._sections))

    def _is_filtered(self, name: str) -> bool:
        if name in self._ignored_names:
            return True
        return bool(self._only_names) and name not in self._only_names

    def use_section(self, *names: str) -> None:
        """Choose which sections :meth:`option_value` consults.

        Sections listed first take precedence. The unnamed section is always
        consulted last, so it never needs to be listed.

        Raises:
            MissingSectionError: Some requested sections do not exist. The
                selection is still applied, so callers may treat this as a
                warning.
        """
        selected: list[str] = []
        not_found: list[str] = []
        for name in names:
            if name in selected:
                continue
            selected.append(name)
            if not self.has_section(name):
                not_found.append(name)
        if "" not in selected:
            selected.append("")
        self._selected = selected
        if not_found:
            raise MissingSectionError(str(self._path), not_found)

    def has_section(self, name: str) -> bool:
        return name in self._section_index

    def sections_with_option(self, option_name: str) -> list[str]:
        """Return names of all sections that set ``option_name``."""
        return [section.name for section in self._sections if option_name in section.values]

    def some_section_has_option(self, option_name: str) -> bool:
        return bool(self.sections_with_option(option_name))

    def section_values(self, name: str) -> dict[str, str]:
        """Return a copy of the raw values in section ``name`` (empty if absent)."""
        section = self._section_index.get(name)
        if section is None:
            return {}
        return dict(section.values)

    def option_value(self, name: str) -> tuple[str, bool]:
        """Return the value of ``name`` from the selected sections.

        Raises:
            FileStateError: The file has not been parsed.
        """
        if not self._parsed:
            raise FileStateError(f'Call to OptionValue("{name}") on unparsed file {self._path}')
        for section_name in self._selected:
            section = self._section_index.get(section_name)
            if section is not None and name in section.values:
                return section.values[name], True
        return "", False

    def set_option_value(self, section_name: str, option_name: str, value: str) -> None:
        """Set a value in memory; persisted only by :meth:`write`.

        A Config already using this file must be marked dirty to notice.
        """
        self._get_or_create_section(section_name).values[option_name] = value

    def unset_option_value(self, section_name: str, option_name: str) -> None:
        self._get_or_create_section(section_name).values.pop(option_name, None)

    def same_contents(self, other: OptionFile) -> bool:
        """Return True if both parsed files hold the same sections and values.

        Ordering, formatting, comments and paths are not compared.

        Raises:
            FileStateError: Either file has not been parsed.
        """
        if not self._parsed or not other._parsed:
            raise FileStateError("OptionFile.same_contents called on a file that has not yet been parsed")
        if self._section_index.keys() != other._section_index.keys():
            return False
        return all(
            section.values == other._section_index[name].values for name, section in self._section_index.items()
        )

    def copy_to(self, *path_parts: str | os.PathLike[str]) -> OptionFile:
        """Return a parsed in-memory copy of this file under another path.

        Sections, values and option definitions are copied; the selection is
        reset to the unnamed section. Nothing is written to disk.

        Raises:
            FileStateError: This file has not been parsed.
        """
        if not self._parsed:
            raise FileStateError(f"OptionFile.copy_to called on unparsed file {self._path}")
        other = OptionFile(*path_parts, ignore_unknown_options=self.ignore_unknown_options)
        for section in self._sections:
            target = other._get_or_create_section(section.name)
            target.values.update(section.values)
            target.opts.update(section.opts)
        other._read = True
        other._parsed = True
        other._selected = [""]
        return other

    def ignore_options(self, *names: str) -> None:
        """Make a later :meth:`parse` drop the named options.

        Raises:
            FileStateError: The file was already parsed.
        """
        if self._parsed:
            raise FileStateError("OptionFile.ignore_options called on a file that has already been parsed")
        for name in names:
            self._ignored_names.add(name)
            self._only_names.discard(name)

    def limit_options(self, *names: str) -> None:
        """Make a later :meth:`parse` drop every option except those named.

        Calls are additive.

        Raises:
            FileStateError: The file was already parsed.
        """
        if self._parsed:
            raise FileStateError("OptionFile.limit_options called on a file that has already been parsed")
        for name in names:
            self._only_names.add(name)
            self._ignored_names.discard(name)

    def deprecation_warnings(self) -> list[str]:
        """Return a warning for each deprecated option set in any section.

        Raises:
            FileStateError: The file has not been parsed.
        """
        if not self._parsed:
            raise FileStateError(f"Call to DeprecationWarnings() on unparsed file {self._path}")
        warnings: list[str] = []
        for section in self._sections:
            for name, option in section.opts.items():
                if option.deprecated:
                    warnings.append(f"{self._path}: Option {name} is deprecated. {option.deprecation_details}".rstrip())
        return warnings

    def render(self) -> str:
        """Return the file's sections in canonical text form.

        Keys are sorted within each section. Comments and original formatting
        are not preserved.
        """
        lines: list[str] = []
        last = len(self._sections) - 1
        for position, section in enumerate(self._sections):
            if section.name:
                lines.append(f"[{section.name}]")
            for key in sorted(section.values):
                lines.append(_render_value_line(key, section.values[key], section.opts.get(key)))
            if position < last and (section.name or section.values):
                lines.append("")
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    def write(self, overwrite: bool = False) -> None:
        """Write the canonical form of the file to disk.

        An empty configuration is not written.

        Raises:
            FileExistsError: The file exists and ``overwrite`` is False.
            OSError: The file cannot be written.
        """
        contents = self.render()
        if not contents:
            logger.warning("Skipping write to %s due to empty configuration", self._path)
            return
        with self._path.open("w" if overwrite else "x", encoding="utf-8") as fh:
            fh.write(contents)
        self._contents = contents
        self._read = True
        self._parsed = True
        if not self._selected:
            self._selected = [""]

    def _get_or_create_section(self, name: str) -> Section:
        section = self._section_index.get(name)
        if section is None:
            section = Section(name)
            self._sections.append(section)
            self._section_index[name] = section
        return section


def _render_value_line(key: str, value: str, option: Option | None) -> str:
    # options set via set_option_value may lack a definition; treat them as strings
    if option is not None and option.is_bool:
        if value == "0":
            return f"skip-{key}"
        if value == "1":
            return key
        return f"{key}={value}"
    if value == "":
        return key
    return f"{key}={value}"


__all__ = [
    "OptionFile",
    "Section",
]
