import io

import pytest

from gitmodule.diff import (
    Diff,
    DiffFile,
    DiffFileType,
    DiffLine,
    DiffLineType,
    DiffSection,
    parse_diff,
)
from gitmodule.errors import GitError


def hdr(content):
    return DiffLine(DiffLineType.SECTION, content)


def plain(content, left, right):
    return DiffLine(DiffLineType.PLAIN, content, left, right)


def add(content, right):
    return DiffLine(DiffLineType.ADD, content, 0, right)


def delete(content, left):
    return DiffLine(DiffLineType.DELETE, content, left, 0)


PROJECT = (
    ' <project xmlns="https://example.com/POM/4.0.0" '
    'xmlns:xsi="https://example.com/XMLSchema-instance"'
)
SCHEMA = (
    '   xsi:schemaLocation="https://example.com/POM/4.0.0 '
    'https://example.com/maven-v4_0_0.xsd">'
)

GITMODULES_LINES = [
    "diff --git a/.gitmodules b/.gitmodules",
    "new file mode 100644",
    "index 0000000..6abde17",
    "--- /dev/null",
    "+++ b/.gitmodules",
    "@@ -0,0 +1,3 @@",
    '+[submodule "gogs/docs-api"]',
    "+\tpath = gogs/docs-api",
    "+\turl = https://example.com/docs-api.git",
]
SUBMODULE_LINES = [
    "diff --git a/gogs/docs-api b/gogs/docs-api",
    "new file mode 160000",
    "index 0000000..6b08f76",
    "--- /dev/null",
    "+++ b/gogs/docs-api",
    "@@ -0,0 +1 @@",
    "+Subproject commit 6b08f76a5313fa3d26859515b30aa17a5faa2807",
]


def gitmodules_partial():
    return DiffFile(
        name=".gitmodules",
        type=DiffFileType.ADD,
        index="6abde17",
        sections=[
            DiffSection(
                lines=[
                    hdr("@@ -0,0 +1,3 @@"),
                    add('+[submodule "gogs/docs-api"]', 1),
                    add("+\tpath = gogs/docs-api", 2),
                ],
                num_additions=2,
            )
        ],
        num_additions=2,
        is_incomplete=True,
    )


CASES = [
    pytest.param(
        "\n".join(GITMODULES_LINES + SUBMODULE_LINES),
        0,
        0,
        0,
        Diff(
            files=[
                DiffFile(
                    name=".gitmodules",
                    type=DiffFileType.ADD,
                    index="6abde17",
                    sections=[
                        DiffSection(
                            lines=[
                                hdr("@@ -0,0 +1,3 @@"),
                                add('+[submodule "gogs/docs-api"]', 1),
                                add("+\tpath = gogs/docs-api", 2),
                                add("+\turl = https://example.com/docs-api.git", 3),
                            ],
                            num_additions=3,
                        )
                    ],
                    num_additions=3,
                ),
                DiffFile(
                    name="gogs/docs-api",
                    type=DiffFileType.ADD,
                    index="6b08f76",
                    sections=[
                        DiffSection(
                            lines=[
                                hdr("@@ -0,0 +1 @@"),
                                add("+Subproject commit 6b08f76a5313fa3d26859515b30aa17a5faa2807", 1),
                            ],
                            num_additions=1,
                        )
                    ],
                    num_additions=1,
                    is_submodule=True,
                ),
            ],
            total_additions=4,
        ),
        id="submodule",
    ),
    pytest.param(
        "\n".join(
            [
                "diff --git a/pom.xml b/pom.xml",
                "index ee791be..9997571 100644",
                "--- a/pom.xml",
                "+++ b/pom.xml",
                "@@ -1,7 +1,7 @@",
                PROJECT,
                SCHEMA,
                "   <modelVersion>4.0.0</modelVersion>",
                "-  <groupId>com.ambientideas</groupId>",
                "+  <groupId>com.github</groupId>",
                "   <artifactId>egitdemo</artifactId>",
                "   <packaging>jar</packaging>",
                "   <version>1.0-SNAPSHOT</version>",
            ]
        ),
        0,
        0,
        0,
        Diff(
            files=[
                DiffFile(
                    name="pom.xml",
                    type=DiffFileType.CHANGE,
                    index="9997571",
                    sections=[
                        DiffSection(
                            lines=[
                                hdr("@@ -1,7 +1,7 @@"),
                                plain(PROJECT, 1, 1),
                                plain(SCHEMA, 2, 2),
                                plain("   <modelVersion>4.0.0</modelVersion>", 3, 3),
                                delete("-  <groupId>com.ambientideas</groupId>", 4),
                                add("+  <groupId>com.github</groupId>", 4),
                                plain("   <artifactId>egitdemo</artifactId>", 5, 5),
                                plain("   <packaging>jar</packaging>", 6, 6),
                                plain("   <version>1.0-SNAPSHOT</version>", 7, 7),
                            ],
                            num_additions=1,
                            num_deletions=1,
                        )
                    ],
                    num_additions=1,
                    num_deletions=1,
                )
            ],
            total_additions=1,
            total_deletions=1,
        ),
        id="change",
    ),
    pytest.param(
        "\n".join(
            [
                "diff --git a/img/sourcegraph.png b/img/sourcegraph.png",
                "new file mode 100644",
                "index 0000000..2ce9188",
                "Binary files /dev/null and b/img/sourcegraph.png differ",
            ]
        ),
        0,
        0,
        0,
        Diff(
            files=[
                DiffFile(
                    name="img/sourcegraph.png",
                    type=DiffFileType.ADD,
                    index="2ce9188",
                    is_binary=True,
                )
            ]
        ),
        id="binary",
    ),
    pytest.param(
        "diff --git a/fix.txt b/fix.txt\ndeleted file mode 100644\nindex e69de29..0000000",
        0,
        0,
        0,
        Diff(files=[DiffFile(name="fix.txt", type=DiffFileType.DELETE, index="e69de29")]),
        id="deleted",
    ),
    pytest.param(
        "diff --git a/runme.sh b/run.sh\nsimilarity index 100%\nrename from runme.sh\nrename to run.sh",
        0,
        0,
        0,
        Diff(files=[DiffFile(name="run.sh", type=DiffFileType.RENAME, old_name="runme.sh")]),
        id="pure-rename",
    ),
    pytest.param(
        "\n".join(
            [
                "",
                "diff --git a/dir/file.txt b/dir/file.txt",
                "index b6fc4c620b67d95f953a5c1c1230aaab5db5a1b0"
                "..ab80bda5dd90d8b42be25ac2c7a071b722171f09 100644",
                "--- a/dir/file.txt",
                "+++ b/dir/file.txt",
                "@@ -1 +1,3 @@",
                "-hello",
                "\\ No newline at end of file",
                "+hello",
                "+",
                "+fdsfdsfds",
                "\\ No newline at end of file",
            ]
        ),
        0,
        0,
        0,
        Diff(
            files=[
                DiffFile(
                    name="dir/file.txt",
                    type=DiffFileType.CHANGE,
                    index="ab80bda5dd90d8b42be25ac2c7a071b722171f09",
                    sections=[
                        DiffSection(
                            lines=[
                                hdr("@@ -1 +1,3 @@"),
                                delete("-hello", 1),
                                add("+hello", 1),
                                add("+", 2),
                                add("+fdsfdsfds", 3),
                            ],
                            num_additions=3,
                            num_deletions=1,
                        )
                    ],
                    num_additions=3,
                    num_deletions=1,
                )
            ],
            total_additions=3,
            total_deletions=1,
        ),
        id="no-newline",
    ),
    pytest.param(
        "\n".join(
            [
                "diff --git a/src/app/tabs/teacher/teacher.module.ts "
                "b/src/app/tabs/friends/friends.module.ts",
                "similarity index 69%",
                "rename from src/app/tabs/teacher/teacher.module.ts",
                "rename to src/app/tabs/friends/friends.module.ts",
                "index ce53c7e..56a156b 100644",
                "--- a/src/app/tabs/teacher/teacher.module.ts",
                "+++ b/src/app/tabs/friends/friends.module.ts",
                "@@ -2,9 +2,9 @@ import { IonicModule } from '@ionic/angular'",
                " import { RouterModule } from '@angular/router'",
                " import { NgModule } from '@angular/core'",
                " import { CommonModule } from '@angular/common'",
                "-import { FormsModule } from '@angular/forms'",
                "-import { TeacherPage } from './teacher.page'",
                " import { ComponentsModule } from '@components/components.module'",
                "+import { FormsModule } from '@angular/forms'",
                "+import { FriendsPage } from './friends.page'",
            ]
        ),
        0,
        0,
        0,
        Diff(
            files=[
                DiffFile(
                    name="src/app/tabs/friends/friends.module.ts",
                    type=DiffFileType.RENAME,
                    index="56a156b",
                    sections=[
                        DiffSection(
                            lines=[
                                hdr("@@ -2,9 +2,9 @@ import { IonicModule } from '@ionic/angular'"),
                                plain(" import { RouterModule } from '@angular/router'", 2, 2),
                                plain(" import { NgModule } from '@angular/core'", 3, 3),
                                plain(" import { CommonModule } from '@angular/common'", 4, 4),
                                delete("-import { FormsModule } from '@angular/forms'", 5),
                                delete("-import { TeacherPage } from './teacher.page'", 6),
                                plain(" import { ComponentsModule } from '@components/components.module'", 7, 5),
                                add("+import { FormsModule } from '@angular/forms'", 6),
                                add("+import { FriendsPage } from './friends.page'", 7),
                            ],
                            num_additions=2,
                            num_deletions=2,
                        )
                    ],
                    num_additions=2,
                    num_deletions=2,
                    old_name="src/app/tabs/teacher/teacher.module.ts",
                )
            ],
            total_additions=2,
            total_deletions=2,
        ),
        id="rename-with-changes",
    ),
    pytest.param(
        "\n".join(
            [
                "diff --git a/.travis.yml b/.travis.yml",
                "index 335db7ea..51d7543e 100644",
                "--- a/.travis.yml",
                "+++ b/.travis.yml",
                "@@ -1,9 +1,6 @@",
                " sudo: false",
                " language: node_js",
                " node_js:",
                "-  - 1.4.x",
                "-  - 1.5.x",
                "-  - 1.6.x",
                "   - 1.7.x",
                "   - 1.8.x",
                "   - 1.9.x",
                "@@ -12,6 +9,7 @@ node_js:",
                "   - 1.12.x",
                "   - 1.13.x",
                " ",
                "+install: npm ci",
                " script: ",
                "   - npm run lint",
                "   - npm test",
            ]
        ),
        0,
        2,
        0,
        Diff(
            files=[
                DiffFile(
                    name=".travis.yml",
                    type=DiffFileType.CHANGE,
                    index="51d7543e",
                    sections=[
                        DiffSection(
                            lines=[
                                hdr("@@ -1,9 +1,6 @@"),
                                plain(" sudo: false", 1, 1),
                                plain(" language: node_js", 2, 2),
                                plain(" node_js:", 3, 3),
                                delete("-  - 1.4.x", 4),
                                delete("-  - 1.5.x", 5),
                                delete("-  - 1.6.x", 6),
                                plain("   - 1.7.x", 7, 4),
                                plain("   - 1.8.x", 8, 5),
                                plain("   - 1.9.x", 9, 6),
                            ],
                            num_deletions=3,
                        )
                    ],
                    num_deletions=3,
                    is_incomplete=True,
                )
            ],
            total_deletions=3,
            is_incomplete=True,
        ),
        id="max-file-lines",
    ),
    pytest.param(
        "\n".join(GITMODULES_LINES),
        0,
        0,
        30,
        Diff(files=[gitmodules_partial()], total_additions=2, is_incomplete=True),
        id="max-line-chars",
    ),
    pytest.param(
        "\n".join(GITMODULES_LINES + SUBMODULE_LINES),
        1,
        2,
        30,
        Diff(files=[gitmodules_partial()], total_additions=2, is_incomplete=True),
        id="all-limits",
    ),
]


@pytest.mark.parametrize("text, max_files, max_file_lines, max_line_chars, expected", CASES)
def test_parse_diff(text, max_files, max_file_lines, max_line_chars, expected):
    result = parse_diff(io.StringIO(text), max_files, max_file_lines, max_line_chars)
    assert result == expected


def test_parse_diff_accepts_bytes_and_binary_streams():
    text = "\n".join(GITMODULES_LINES + SUBMODULE_LINES)
    from_text = parse_diff(text)
    assert parse_diff(text.encode("utf-8")) == from_text
    assert parse_diff(io.BytesIO(text.encode("utf-8"))) == from_text
    assert from_text.num_files() == 2


def test_parse_diff_quoted_names():
    text = "\n".join(
        [
            'diff --git "a/f\\303\\251 \\"x\\".txt" "b/f\\303\\251 \\"x\\".txt"',
            "index 1234567..89abcde 100644",
        ]
    )
    result = parse_diff(text)
    assert result.files[0].name == 'fé "x".txt'
    assert result.files[0].index == "89abcde"


def test_parse_diff_malformed_index():
    text = "diff --git a/x b/x\nindex abcdef\n"
    with pytest.raises(GitError, match="malformed index"):
        parse_diff(text)


def test_parse_diff_empty_input():
    assert parse_diff("") == Diff()


def test_diff_section_num_lines():
    section = DiffSection(lines=[DiffLine(DiffLineType.ADD, "a line", 1, 10)])
    assert section.num_lines() == 1


def test_diff_section_line():
    line_delete = delete("-  <groupId>com.ambientideas</groupId>", 4)
    line_add = add("+  <groupId>com.github</groupId>", 4)
    section = DiffSection(
        lines=[
            hdr("@@ -1,7 +1,7 @@"),
            plain(PROJECT, 1, 1),
            plain(SCHEMA, 2, 2),
            plain("   <modelVersion>4.0.0</modelVersion>", 3, 3),
            line_delete,
            line_add,
            plain("   <artifactId>egitdemo</artifactId>", 5, 5),
            plain("   <packaging>jar</packaging>", 6, 6),
            plain("   <version>1.0-SNAPSHOT</version>", 7, 7),
        ]
    )
    assert section.line(DiffLineType.DELETE, 4) is line_delete
    assert section.line(DiffLineType.ADD, 4) is line_add
    assert section.line(DiffLineType.ADD, 5) is None


def test_diff_section_line_unbalanced_block():
    section = DiffSection(
        lines=[hdr("@@ -1,1 +1,2 @@"), delete("-a", 1), add("+b", 1), add("+c", 2)]
    )
    assert section.line(DiffLineType.ADD, 1) is None


def test_diff_file():
    file = DiffFile(
        name=".gitmodules",
        type=DiffFileType.ADD,
        index="6abde17",
        sections=[
            DiffSection(
                lines=[
                    hdr("@@ -0,0 +1,3 @@"),
                    add('+[submodule "gogs/docs-api"]', 1),
                    add("+\tpath = gogs/docs-api", 2),
                ]
            )
        ],
        num_additions=2,
        num_deletions=0,
        is_incomplete=True,
    )
    assert file.num_sections() == 1
    assert file.num_additions == 2
    assert file.num_deletions == 0
    assert file.is_created() is True
    assert file.is_deleted() is False
    assert file.is_renamed() is False
    assert file.old_name == ""
    assert file.is_binary is False
    assert file.is_submodule is False
    assert file.is_incomplete is True


def test_diff():
    diff = Diff(
        files=[DiffFile(name="run.sh", type=DiffFileType.RENAME, old_name="runme.sh")],
        total_additions=10,
        total_deletions=20,
    )
    assert diff.num_files() == 1
    assert diff.total_additions == 10
    assert diff.total_deletions == 20
    assert diff.is_incomplete is False
    assert diff.files[0].is_renamed() is True