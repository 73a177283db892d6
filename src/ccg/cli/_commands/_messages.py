"""Localized message catalogs for CLI output.

Only the CLI boundary is localized; core components report in plain English
through exceptions and result objects.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from ccg.config import Language
from ccg.diff import ChangeKind, ChangeKindStyle, DiffLabels, DiffStyles


@dataclass(frozen=True, slots=True)
class Messages:
    """User-visible strings for one language."""

    # Errors
    error_prefix: str = "Error:"
    caused_by: str = "Caused by:"
    hint_prefix: str = "Hint:"
    cancelled: str = "Operation cancelled."
    candidates_header: str = "Matching checkpoints:"
    more_candidates: str = "... and {count} more"
    changed_paths_header: str = "Changed paths:"
    more_paths: str = "... and {count} more"
    branch_restore_failed: str = (
        "The operation completed, but switching back to your branch failed: {error}"
    )

    # init
    init_start: str = "Initializing Checkpoint Guardian"
    init_repo_created: str = "Initialized git repository in {root}"
    init_branch_created: str = "Created checkpoint branch '{branch}'"
    init_branch_exists: str = "Checkpoint branch '{branch}' already exists"
    init_done: str = "Checkpoint Guardian is ready"
    init_current_branch: str = "Current branch: {branch}"
    init_tip_on_branch: str = "Tip: run 'ccg create' to record a checkpoint"
    init_tip_off_branch: str = (
        "Tip: checkpoints are recorded on '{branch}' while you stay on your branch"
    )

    # create
    create_done: str = "Created checkpoint: {short_sha}"
    create_no_changes: str = "No file changes detected, checkpoint skipped"

    # list
    list_empty: str = "No checkpoints found."
    list_header: str = "Recent checkpoints:"

    # restore
    restore_discard_warning: str = (
        "Warning: restoring will discard {count} newer checkpoint(s)"
    )
    restore_discard_permanent: str = "Discarded checkpoints cannot be recovered"
    restore_target: str = "Restoring checkpoint {short_sha}: {summary}"
    restore_prompt: str = "Continue?"
    restore_done: str = "Restored checkpoint: {short_sha}"
    restore_branch_reset: str = (
        "Branch '{branch}' was reset to this checkpoint; newer checkpoints were "
        "discarded"
    )
    restore_removed: str = "Removed {count} file(s) not present in the checkpoint"
    restore_back_on: str = "You are still on '{branch}'"

    # show
    show_checkpoint: str = "Checkpoint {sha}"
    show_author: str = "Author: {name} <{email}>"
    show_date: str = "Date:   {timestamp}"
    show_files: str = "Files changed:"
    show_no_files: str = "No files changed"
    show_detailed_diff: str = "Detailed diff:"

    # diff
    diff_header: str = "Comparing {a} -> {b}"
    diff_worktree: str = "working tree"

    # Renderer
    kind_labels: Mapping[ChangeKind, str] = field(
        default_factory=lambda: MappingProxyType(
            {
                ChangeKind.ADDED: "added",
                ChangeKind.DELETED: "deleted",
                ChangeKind.MODIFIED: "modified",
                ChangeKind.RENAMED: "renamed",
                ChangeKind.COPIED: "copied",
            }
        )
    )
    diff_labels: DiffLabels = field(default_factory=DiffLabels)

    def diff_styles(self) -> DiffStyles:
        """Build renderer styles carrying this catalog's labels."""
        defaults = DiffStyles()
        kinds = {
            kind: ChangeKindStyle(
                glyph=style.glyph,
                label=self.kind_labels.get(kind, style.label),
                style=style.style,
            )
            for kind, style in defaults.kinds.items()
        }
        return DiffStyles(kinds=MappingProxyType(kinds), labels=self.diff_labels)


ENGLISH: Final = Messages()

CHINESE: Final = Messages(
    error_prefix="错误:",
    caused_by="原因:",
    hint_prefix="提示:",
    cancelled="操作已取消。",
    candidates_header="匹配的检查点:",
    more_candidates="... 还有 {count} 个匹配",
    changed_paths_header="已更改的路径:",
    more_paths="... 还有 {count} 个",
    branch_restore_failed="操作成功完成，但分支恢复失败: {error}",
    init_start="初始化 Checkpoint Guardian",
    init_repo_created="已在 {root} 初始化 git 仓库",
    init_branch_created="已创建检查点分支 '{branch}'",
    init_branch_exists="检查点分支 '{branch}' 已存在",
    init_done="Checkpoint Guardian 初始化完成！",
    init_current_branch="当前分支: {branch}",
    init_tip_on_branch="提示: 现在可以使用 'ccg create' 创建检查点",
    init_tip_off_branch="提示: 检查点会记录在 '{branch}' 分支上，无需切换分支",
    create_done="已创建检查点: {short_sha}",
    create_no_changes="没有检测到文件变更，跳过创建检查点",
    list_empty="未找到检查点。",
    list_header="最近的检查点:",
    restore_discard_warning="警告: 此操作将丢失 {count} 个后续检查点",
    restore_discard_permanent="继续执行将永久丢失这些检查点!",
    restore_target="恢复到检查点 {short_sha}: {summary}",
    restore_prompt="是否继续?",
    restore_done="成功恢复到检查点: {short_sha}",
    restore_branch_reset="'{branch}' 分支已重置到指定检查点，后续提交已被丢弃",
    restore_removed="已删除 {count} 个不在检查点中的文件",
    restore_back_on="你仍在 '{branch}' 分支上",
    show_checkpoint="检查点 {sha}",
    show_author="作者: {name} <{email}>",
    show_date="日期: {timestamp}",
    show_files="变更的文件:",
    show_no_files="没有文件变更",
    show_detailed_diff="详细差异:",
    diff_header="比较 {a} -> {b}",
    diff_worktree="工作区",
    kind_labels=MappingProxyType(
        {
            ChangeKind.ADDED: "新增",
            ChangeKind.DELETED: "删除",
            ChangeKind.MODIFIED: "修改",
            ChangeKind.RENAMED: "重命名",
            ChangeKind.COPIED: "复制",
        }
    ),
    diff_labels=DiffLabels(
        no_differences="没有文件差异",
        binary="二进制文件不同",
        old="旧文件",
        new="新文件",
        summary="{files} 个文件变更, {insertions} 行新增(+), {deletions} 行删除(-)",
        legend="行格式: 旧行号 新行号 +/- 内容",
    ),
)

_CATALOGS: Final = {Language.EN: ENGLISH, Language.ZH: CHINESE}


def get_messages(language: Language) -> Messages:
    """Return the catalog for a language, falling back to English."""
    return _CATALOGS.get(language, ENGLISH)
