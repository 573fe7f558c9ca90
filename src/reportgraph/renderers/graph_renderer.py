# src/reportgraph/renderers/graph_renderer.py
"""
封裝報告圖的 Graphviz 力導向 (sfdp/fdp/neato) 渲染邏輯。
支援可配置的渲染超時 (render_timeout)。
"""

# 1. 標準庫導入
import html
import logging
import math
import subprocess
from pathlib import Path
from typing import Any

# 2. 第三方庫導入
import graphviz

# 3. 本專案導入
from reportgraph.models import EDGE_KINDS, Node, ReportGraph
from reportgraph.utils.color_utils import generate_color_palette, get_analogous_dark_color, get_severity_color

FONT_NAME = "Microsoft YaHei"
DEFAULT_EDGE_STYLE: dict[str, Any] = {"color": "#848484", "style": "solid", "distance": 100, "strength": 0.3}


def _assign_group_colors(graph: ReportGraph) -> dict[str, str]:
    groups = sorted({node.group for node in graph.nodes})
    palette = generate_color_palette(len(groups))
    return dict(zip(groups, palette, strict=True))


def _node_fill_color(node: Node, group_colors: dict[str, str], color_by: str) -> str:
    if color_by == "severity" and node.issues.severity:
        return get_severity_color(node.issues.severity)
    return group_colors.get(node.group, get_severity_color(None))


def _node_tooltip(node: Node) -> str:
    lines = [node.id, f"Category: {node.category}", f"Tokens: {node.tokens}"]
    if node.issues.count:
        lines.append(f"Issues: {node.issues.count} ({node.issues.severity or 'unknown'})")
    return "\n".join(lines)


def _create_legend_html(
    group_colors: dict[str, str],
    active_kinds: set[str],
    edge_styles: dict[str, dict[str, Any]],
) -> str:
    """生成包含群組顏色與邊種類的圖例 HTML 表格。"""
    font_tag_start = f'<FONT FACE="{FONT_NAME}" POINT-SIZE="10">'
    font_tag_end = "</FONT>"

    rows = [f'<TR><TD COLSPAN="2" ALIGN="LEFT"><B>{font_tag_start}群組{font_tag_end}</B></TD></TR>']
    for group, color in group_colors.items():
        rows.append(
            f'<TR><TD BGCOLOR="{color}" WIDTH="16" HEIGHT="16" BORDER="1" FIXEDSIZE="TRUE"></TD>'
            f'<TD ALIGN="LEFT">{font_tag_start}{html.escape(group)}{font_tag_end}</TD></TR>'
        )

    if active_kinds:
        rows.append(f'<TR><TD COLSPAN="2" ALIGN="LEFT"><B>{font_tag_start}關係類型{font_tag_end}</B></TD></TR>')
        style_map = {"dashed": "- - -", "dotted": "&middot; &middot; &middot;", "bold": "&#9473;&#9473;"}
        for kind in EDGE_KINDS:
            if kind not in active_kinds:
                continue
            style = edge_styles.get(kind, DEFAULT_EDGE_STYLE)
            symbol = style_map.get(style.get("style", "solid"), "&mdash;&mdash;")
            rows.append(
                f'<TR><TD ALIGN="RIGHT"><FONT COLOR="{style.get("color", "black")}">{symbol}</FONT></TD>'
                f'<TD ALIGN="LEFT">{font_tag_start}{kind}{font_tag_end}</TD></TR>'
            )

    return (
        f'<TABLE BORDER="1" CELLBORDER="0" CELLSPACING="4" CELLPADDING="2" '
        f'BGCOLOR="#FAFAFA" COLOR="#DDDDDD">{"".join(rows)}</TABLE>'
    )


def generate_graph_dot_source(graph: ReportGraph, title: str, graph_config: dict[str, Any]) -> str:
    """
    產生報告圖的 DOT 原始碼。

    節點寬度隨 sqrt(size) 增長；邊的長度 (len) 與權重 (weight) 取自各邊種類的
    distance 與 strength 設定，讓力導向引擎將相似檔案拉得更近。
    """
    node_styles = graph_config.get("node_styles", {})
    edge_styles = graph_config.get("edge_styles", {})
    layout_engine = graph_config.get("layout_engine", "sfdp")
    color_by = node_styles.get("color_by", "severity")
    base_width = float(node_styles.get("base_width", 0.3))
    size_scale = float(node_styles.get("size_scale", 0.02))
    show_labels = node_styles.get("show_labels", True)

    dot = graphviz.Digraph("ReportGraph", engine=layout_engine)

    if not graph.nodes:
        dot.node("empty_graph", "圖中無任何節點", shape="plaintext")
        return dot.source

    group_colors = _assign_group_colors(graph)
    active_kinds = {edge.kind for edge in graph.edges}

    title_html = (
        f'<TABLE BORDER="0" CELLBORDER="0" CELLSPACING="0">'
        f'<TR><TD><FONT FACE="{FONT_NAME}" POINT-SIZE="20"><B>{html.escape(title)}</B></FONT></TD></TR>'
        f'<TR><TD><FONT FACE="{FONT_NAME}" POINT-SIZE="12">檔案關係圖 (引擎: {layout_engine}，'
        f"{len(graph.nodes)} 個節點，{len(graph.edges)} 條邊)</FONT></TD></TR>"
        f"</TABLE>"
    )
    legend_html = _create_legend_html(group_colors, active_kinds, edge_styles)
    header_html = (
        f'<<TABLE BORDER="0" CELLBORDER="0" CELLSPACING="0" CELLPADDING="8">'
        f"<TR><TD>{title_html}</TD></TR>"
        f"<TR><TD>{legend_html}</TD></TR>"
        f"</TABLE>>"
    )

    dot.attr(
        label=header_html,
        labelloc="t",
        fontname=FONT_NAME,
        charset="UTF-8",
        overlap="prism",
        splines="true",
        outputorder="edgesfirst",
    )
    dot.attr("node", shape="circle", style="filled", fixedsize="true", fontname="Arial", fontsize="10")
    dot.attr("edge", arrowsize="0.6")

    for node in graph.nodes:
        fill_color = _node_fill_color(node, group_colors, color_by)
        width = base_width + math.sqrt(node.size) * size_scale
        dot.node(
            node.id,
            label="",
            xlabel=node.label if show_labels else "",
            width=f"{width:.3f}",
            fillcolor=fill_color,
            color=get_analogous_dark_color(fill_color),
            tooltip=_node_tooltip(node),
        )

    for edge in graph.edges:
        style = edge_styles.get(edge.kind, DEFAULT_EDGE_STYLE)
        attrs = {
            "color": str(style.get("color", DEFAULT_EDGE_STYLE["color"])),
            "style": str(style.get("style", "solid")),
            "penwidth": str(style.get("penwidth", 1)),
            "len": f"{float(style.get('distance', DEFAULT_EDGE_STYLE['distance'])) / 100:.2f}",
            "weight": str(style.get("strength", DEFAULT_EDGE_STYLE["strength"])),
        }
        if edge.kind != "dependency":
            attrs["dir"] = "none"
        dot.edge(edge.source, edge.target, **attrs)

    return dot.source


def render_graph(graph: ReportGraph, output_path: Path, title: str, graph_config: dict[str, Any]) -> bool:
    """
    使用 Graphviz 佈局引擎將報告圖渲染成圖片檔案。

    Returns:
        渲染成功時回傳 True；任何 Graphviz 錯誤都只記錄日誌並回傳 False。
    """
    layout_engine = graph_config.get("layout_engine", "sfdp")
    dpi = graph_config.get("dpi", 150)
    render_timeout = graph_config.get("render_timeout", 120)
    output_format = output_path.suffix[1:] or graph_config.get("output_format", "png")

    dot_source = generate_graph_dot_source(graph, title, graph_config)
    logging.info(f"準備將報告圖渲染至: {output_path} (引擎: {layout_engine}, DPI: {dpi}, Timeout: {render_timeout}s)")
    command = [layout_engine, f"-T{output_format}", f"-Gdpi={dpi}"]
    try:
        process = subprocess.run(
            command, input=dot_source.encode("utf-8"), capture_output=True, check=True, timeout=render_timeout
        )
        with open(output_path, "wb") as f:
            f.write(process.stdout)
        logging.info(f"圖表已成功儲存至: {output_path}")
        return True
    except subprocess.TimeoutExpired:
        logging.error(f"Graphviz 渲染超時 (超過 {render_timeout} 秒)。")
        logging.info("建議：降低 'limits.max_nodes'，加入 'filtering.exclude_nodes'，或在設定中增加 'render_timeout'。")
    except subprocess.CalledProcessError as e:
        logging.error(f"Graphviz ({layout_engine}) 執行時返回錯誤。")
        error_message = e.stderr.decode("utf-8", errors="ignore")
        logging.error(f"Graphviz 錯誤訊息:\n{error_message}")
    except FileNotFoundError:
        logging.error(f"Graphviz 執行檔 '{layout_engine}' 未找到。請確保 Graphviz 已安裝並已加入系統 PATH。")
    except OSError as e:
        logging.error(f"渲染圖表時發生錯誤: {e}")
    return False
