"""Triangle render pipeline construction."""

from __future__ import annotations

from typing import Any

from framepace.api.render import RenderableProgram

TRIANGLE_WGSL = """
@vertex
fn vs_main(@builtin(vertex_index) in_vertex_index: u32) -> @builtin(position) vec4<f32> {
    let x = f32(i32(in_vertex_index) - 1);
    let y = f32(i32(in_vertex_index & 1u) * 2 - 1);
    return vec4<f32>(x, y, 0.0, 1.0);
}

@fragment
fn fs_main() -> @location(0) vec4<f32> {
    return vec4<f32>(1.0, 0.0, 0.0, 1.0);
}
"""


def create_triangle_program(device: Any, target_format: str) -> RenderableProgram:
    """Compile the triangle shader into a pipeline writing ``target_format``."""
    shader = device.create_shader_module(label="framepace.triangle", code=TRIANGLE_WGSL)
    layout = device.create_pipeline_layout(label="framepace.triangle", bind_group_layouts=[])
    pipeline = device.create_render_pipeline(
        label="framepace.triangle",
        layout=layout,
        vertex={"module": shader, "entry_point": "vs_main", "buffers": []},
        fragment={
            "module": shader,
            "entry_point": "fs_main",
            "targets": [{"format": target_format}],
        },
        primitive={"topology": "triangle-list"},
        depth_stencil=None,
    )
    return RenderableProgram(pipeline=pipeline, target_format=str(target_format), label="triangle")


__all__ = ["TRIANGLE_WGSL", "create_triangle_program"]
