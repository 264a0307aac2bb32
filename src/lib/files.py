"""
File handling for batch transforms

Discovers source documents below an input directory, reads them (splitting
off YAML frontmatter), runs one transform per file and writes the result
into a mirrored tree below the output directory.

    docs/guide/intro.md  ->  out/guide/intro.mdx      (forward)
    docs/guide/intro.mdx ->  out/guide/intro.md       (reverse)
"""

import re
import shutil
from pathlib import Path
from typing import Dict, List, Optional

from ..config import TranspilerConfig, appsettings
from ..models.annotations import ErrorKind, TransformError, TransformResult
from ..models.documents import FileResult, SourceDocument
from .frontmatter import FrontmatterError, frontmatter_split
from .log import LOG
from .transpiler import Transpiler


# Words restored to their usual spelling in titles derived from file names
TITLE_ACRONYMS: Dict[str, str] = {
    "Api": "API", "Faq": "FAQ", "Url": "URL", "Html": "HTML", "Css": "CSS",
    "Js": "JS", "Json": "JSON", "Xml": "XML", "Sql": "SQL", "Ui": "UI",
    "Ux": "UX", "Cli": "CLI", "Sdk": "SDK", "Rest": "REST",
    "Graphql": "GraphQL", "Oauth": "OAuth", "Jwt": "JWT", "Crud": "CRUD",
    "Mvc": "MVC", "Mvp": "MVP", "Mvvm": "MVVM",
}

REVERSE_EXTENSION = ".md"


def title_fromFilename(path: Path) -> str:
    """
    Derive a document title from a file name

    Example:
        >>> title_fromFilename(Path("docs/rest-api_faq.md"))
        'REST API FAQ'
    """
    words = re.split(r"[-_\s]+", path.stem)
    titled = [word[:1].upper() + word[1:] for word in words if word]
    return " ".join(TITLE_ACRONYMS.get(word, word) for word in titled)


def errors_offset(errors: List[TransformError], offset: int) -> List[TransformError]:
    """Shift body line numbers to file line numbers"""
    if not offset:
        return errors
    for error in errors:
        if error.line:
            error.line += offset
    return errors


class FileHandler:
    """
    Reads, transforms and writes documents for one batch run

    Args:
        config: Transform configuration
        dry_run: Transform but never write anything
        backup: Copy an existing target to <target><backup_suffix> before
                overwriting it (also enabled by config.backup_original)
    """

    def __init__(self, config: Optional[TranspilerConfig] = None,
                 dry_run: bool = False, backup: bool = False) -> None:
        self.config = config or TranspilerConfig()
        self.dry_run = dry_run
        self.backup = backup or self.config.backup_original
        self.transpiler = Transpiler(self.config)

    def sources_find(self, inputdir: Path, reverse: bool = False) -> List[Path]:
        """
        Find the documents to transform below a directory

        Forward runs pick up Markdown sources, reverse runs pick up files
        with the configured output extension. Ignored directories and
        backup copies are skipped.

        Returns:
            Sorted list of file paths
        """
        extensions = {self.config.output_extension} if reverse else set(appsettings.source_extensions)
        ignored = set(appsettings.ignore_dirs)

        sources = []
        for path in inputdir.rglob("*"):
            if not path.is_file() or path.suffix not in extensions:
                continue
            if ignored.intersection(path.relative_to(inputdir).parts[:-1]):
                continue
            if path.name.endswith(appsettings.backup_suffix):
                continue
            sources.append(path)

        LOG(f"Found {len(sources)} source files in {inputdir}", level=2)
        return sorted(sources)

    def source_read(self, path: Path) -> SourceDocument:
        """
        Read a document and split off its frontmatter

        Raises:
            OSError: If the file cannot be read
            FrontmatterError: If the frontmatter is malformed
        """
        text = path.read_text(encoding="utf-8")
        frontmatter, body, offset = frontmatter_split(text)
        return SourceDocument(body=body, frontmatter=frontmatter, body_offset=offset, original=text)

    def outputPath_make(self, path: Path, inputdir: Path, outputdir: Path, reverse: bool = False) -> Path:
        """Mirror `path` below outputdir with the target extension"""
        extension = REVERSE_EXTENSION if reverse else self.config.output_extension
        return (outputdir / path.relative_to(inputdir)).with_suffix(extension)

    def result_write(self, path: Path, content: str) -> Optional[Path]:
        """
        Write transformed content

        Returns:
            The backup path if one was made, else None
        """
        if self.dry_run:
            LOG(f"Dry run: would write {path}", level=2)
            return None

        backup_path = None
        if self.backup and path.exists():
            backup_path = path.with_name(path.name + appsettings.backup_suffix)
            shutil.copy2(path, backup_path)
            LOG(f"Backed up {path} to {backup_path}", level=2)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        LOG(f"Wrote {path}", level=2)
        return backup_path

    def document_transform(self, document: SourceDocument, path: Path,
                           reverse: bool = False,
                           description: Optional[str] = None) -> TransformResult:
        """Run the transform of one document already read from disk"""
        if reverse:
            return self.transpiler.reverse(document.original)

        fallback = title_fromFilename(path) if self.config.title_from_filename else None
        result = self.transpiler.forward(
            document.body,
            description=description,
            frontmatter=document.frontmatter,
            fallback_title=fallback,
        )
        errors_offset(result.errors, document.body_offset)
        return result

    def file_transform(self, path: Path, inputdir: Path, outputdir: Path,
                       reverse: bool = False, description: Optional[str] = None,
                       validate_only: bool = False) -> FileResult:
        """
        Read, transform and write one file

        Read, transform and write failures are recorded as errors on the
        result; they never propagate.

        Args:
            path: Source file
            inputdir: Root of the source tree
            outputdir: Root of the output tree
            reverse: Convert MDX back to annotated Markdown
            description: Frontmatter description (forward only)
            validate_only: Transform in memory, write nothing

        Returns:
            FileResult describing what happened
        """
        result = FileResult(input_path=path)

        try:
            document = self.source_read(path)
        except FrontmatterError as e:
            result.success = False
            result.errors.append(TransformError(message=str(e), line=1, kind=ErrorKind.ERROR))
            return result
        except (OSError, UnicodeDecodeError) as e:
            result.success = False
            result.errors.append(TransformError(message=f"Failed to read {path}: {e}", line=0))
            return result

        try:
            transformed = self.document_transform(document, path, reverse, description)
        except Exception as e:
            LOG(f"Transform of {path} raised: {e}", level=3)
            result.success = False
            result.errors.append(TransformError(message=f"Failed to transform {path}: {e}", line=0))
            return result

        result.errors.extend(transformed.errors)
        result.success = transformed.success
        if appsettings.strict_mode and result.errors:
            result.success = False

        if validate_only:
            return result

        output_path = self.outputPath_make(path, inputdir, outputdir, reverse)
        try:
            self.result_write(output_path, transformed.content)
        except OSError as e:
            result.success = False
            result.errors.append(TransformError(message=f"Failed to write {output_path}: {e}", line=0))
            return result

        result.output_path = output_path
        return result
