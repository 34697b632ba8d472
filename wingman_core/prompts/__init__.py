"""提示词加载工具。

按语言(locale) 从 prompts/<locale>/ 目录读取提示词模板。模板使用
str.format 占位符，JSON 示例中的花括号写作 {{ }}。
"""

from functools import lru_cache
from pathlib import Path


PROMPTS_DIR = Path(__file__).resolve().parent


@lru_cache(maxsize=None)
def load_prompt(name: str, locale: str = "en") -> str:
    """加载名为 name 的模板文本（不含扩展名），去掉首尾空白。"""

    fname = PROMPTS_DIR / locale / f"{name}.md"
    return fname.read_text(encoding="utf-8").strip()


def load_system_prompt(locale: str = "en") -> str:
    """助手的系统角色前言，每次调用都会放在最前面。"""

    return load_prompt("system", locale)


def render_prompt(name: str, locale: str = "en", **values: str) -> str:
    return load_prompt(name, locale).format(**values)
