"""统一异常体系

所有业务异常继承 CrateFetchError，每类带一个稳定的 code。
CLI 层据此输出友好提示。
"""

from __future__ import annotations

from pathlib import Path


class CrateFetchError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(CrateFetchError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(CrateFetchError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"


class EmptyCrateNameError(ValidationError):
    """crate 名称为空"""

    code = "EMPTY_CRATE_NAME"

    def __init__(self) -> None:
        super().__init__("crate 名称不能为空")


class NoCrateError(CrateFetchError):
    """任何模糊变体都未在索引中找到"""

    code = "NO_CRATE"

    def __init__(self, name: str) -> None:
        super().__init__(f"索引中不存在 crate `{name}`")
        self.name = name


class InvalidSummaryJsonError(CrateFetchError):
    """索引条目不是 UTF-8，或某行不符合版本记录格式"""

    code = "INVALID_SUMMARY_JSON"


class NoVersionsAvailableError(CrateFetchError):
    """过滤后没有可用版本（全部 yanked，或只有预发布版本）"""

    code = "NO_VERSIONS_AVAILABLE"

    def __init__(self) -> None:
        super().__init__("没有可用的版本")


class MissingRegistryCheckoutError(CrateFetchError):
    """本地镜像中找不到 refs/remotes/origin/ 下的分支"""

    code = "MISSING_REGISTRY_CHECKOUT"

    def __init__(self, path: Path) -> None:
        super().__init__(f"注册表镜像缺少已检出分支: {path}")
        self.path = path


class NonUnicodeGitPathError(CrateFetchError):
    """ref 名称无法表示为文本"""

    code = "NON_UNICODE_GIT_PATH"

    def __init__(self) -> None:
        super().__init__("git 路径不是有效的 Unicode")


class IndexIoError(CrateFetchError):
    """外部 git 调用或文件系统访问失败"""

    code = "IO_ERROR"


class IndexGitError(CrateFetchError):
    """git 仓库层面的失败（非仓库、ref 不存在、命令返回非零）"""

    code = "GIT_ERROR"


class ManifestParseError(CrateFetchError):
    """Cargo.toml 无法解析或缺少 package.name"""

    code = "PARSE_CARGO_TOML"


class RemoteFetchError(CrateFetchError):
    """远程 manifest 拉取失败"""

    code = "FETCH_FAILED"


class RepoUrlError(ValidationError):
    """仓库 URL 不匹配已知托管平台格式"""

    code = "REPO_URL_ERROR"
