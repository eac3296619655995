from pathlib import Path

from comment_explorer.config import ExplorerConfig
from comment_explorer.index import WorkspaceIndex
from comment_explorer.models import Comment
from comment_explorer.tree import CommentNode, FileNode, TreeModel, relative_label


def write(p: Path, content: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")


def build(tmp_path):
    write(tmp_path / "src" / "a.ts", "// A\n")
    write(tmp_path / "src" / "b.py", "# B\n/* two */\n")
    index = WorkspaceIndex()
    tree = TreeModel(index)
    index.refresh([str(tmp_path)], ExplorerConfig())
    return index, tree


def test_roots_and_children(tmp_path):
    _, tree = build(tmp_path)
    roots = tree.roots()
    assert roots == [
        FileNode(str(tmp_path / "src" / "a.ts"), 1),
        FileNode(str(tmp_path / "src" / "b.py"), 2),
    ]
    a_children = tree.children_of(roots[0])
    assert [(n.comment.text, n.comment.line_number, n.comment.column) for n in a_children] == [("// A", 1, 0)]
    b_children = tree.children_of(roots[1])
    assert [n.comment.text for n in b_children] == ["# B", "/* two */"]


def test_children_of_unknown_or_comment_node_is_empty(tmp_path):
    _, tree = build(tmp_path)
    assert tree.children_of(FileNode(str(tmp_path / "nope.ts"), 3)) == []
    comment_node = tree.children_of(tree.roots()[0])[0]
    assert tree.children_of(comment_node) == []


def test_on_changed_fires_once_per_refresh(tmp_path):
    index, tree = build(tmp_path)
    seen = []
    unsubscribe = tree.on_changed(lambda: seen.append(len(tree.roots())))

    index.refresh([str(tmp_path)], ExplorerConfig())
    index.refresh([], ExplorerConfig())
    assert seen == [2, 0]

    unsubscribe()
    index.refresh([str(tmp_path)], ExplorerConfig())
    assert seen == [2, 0]


def test_failing_callback_does_not_block_others(tmp_path):
    index, tree = build(tmp_path)
    seen = []

    def broken():
        raise ValueError("render failed")

    tree.on_changed(broken)
    tree.on_changed(lambda: seen.append("ok"))
    index.refresh([str(tmp_path)], ExplorerConfig())
    assert seen == ["ok"]


def test_close_detaches_from_index(tmp_path):
    index, tree = build(tmp_path)
    seen = []
    tree.on_changed(lambda: seen.append(1))
    tree.close()
    index.refresh([str(tmp_path)], ExplorerConfig())
    assert seen == []


def test_file_node_display(tmp_path):
    one = FileNode(str(tmp_path / "src" / "a.ts"), 1)
    many = FileNode(str(tmp_path / "src" / "b.py"), 3)
    assert one.description == "1 comment"
    assert many.description == "3 comments"
    assert one.label([str(tmp_path)]) == "src/a.ts"
    assert one.label([str(tmp_path), str(tmp_path / "src")]) == "a.ts"
    assert one.label([str(tmp_path / "elsewhere")]) == one.file_path


def test_relative_label_ignores_sibling_prefix(tmp_path):
    path = str(tmp_path / "src2" / "x.py")
    assert relative_label(path, [str(tmp_path / "src")]) == path


def test_comment_node_navigation():
    comment = Comment(file_path="/w/src/a.ts", text="/* hi */", line_number=4, column=2)
    node = CommentNode(comment)
    assert node.label == "hi"
    assert node.selection == ((3, 2), (3, 10))
    assert comment.length == 8
    assert node.tooltip(["/w"]) == "File: src/a.ts\nLine: 4\nColumn: 3\n\n/* hi */"
