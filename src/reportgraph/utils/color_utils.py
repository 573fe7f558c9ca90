# src/reportgraph/utils/color_utils.py
"""
提供與顏色處理相關的公用函式。
"""

import colorsys

SEVERITY_COLORS: dict[str, str] = {
    "critical": "#ff4d4f",
    "major": "#ff9900",
    "minor": "#ffd666",
    "info": "#91d5ff",
    "default": "#97c2fc",
}

SEVERITY_ORDER: dict[str, int] = {"info": 1, "minor": 2, "major": 3, "critical": 4}


def get_analogous_dark_color(hex_color: str) -> str:
    """
    根據給定的十六進位背景色，計算一個相似的、更深的、醒目的邊框顏色。

    Args:
        hex_color: 十六進位顏色字串 (例如 "#RRGGBB")。

    Returns:
        一個相似深色的十六進位顏色字串。
    """
    hex_color = hex_color.lstrip("#")
    r, g, b = tuple(int(hex_color[i : i + 2], 16) for i in (0, 2, 4))

    hue, lightness, saturation = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)

    dark_l = max(0.1, lightness * 0.3)
    dark_s = min(1.0, saturation * 1.2)

    cr, cg, cb = colorsys.hls_to_rgb(hue, dark_l, dark_s)

    return f"#{int(cr * 255):02x}{int(cg * 255):02x}{int(cb * 255):02x}"


def generate_color_palette(num_colors: int) -> list[str]:
    """使用黃金比例演算法生成一個視覺上可區分的、固定順序的淺色調色盤。"""
    palette = []
    golden_ratio_conjugate = 0.61803398875
    hue = 0.7
    for _ in range(num_colors):
        hue += golden_ratio_conjugate
        hue %= 1
        rgb_float = colorsys.hls_to_rgb(hue, 0.85, 0.8)
        rgb_int = tuple(int(c * 255) for c in rgb_float)
        palette.append(f"#{rgb_int[0]:02x}{rgb_int[1]:02x}{rgb_int[2]:02x}")
    return palette


def normalize_severity(value: object) -> str | None:
    """將報告中的嚴重度字串（例如 "Critical"、"major-issue"）正規化為四個等級之一。"""
    if not value:
        return None
    text = str(value).lower()
    for level in ("critical", "major", "minor", "info"):
        if level in text:
            return level
    return None


def get_severity_color(severity: str | None) -> str:
    return SEVERITY_COLORS.get(severity or "default", SEVERITY_COLORS["default"])
