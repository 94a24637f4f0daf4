"""UI components for the Runway explorer."""

import streamlit as st
from typing import Optional, Sequence
from PIL import Image, ImageDraw

from explorer.image_encoding import data_uri_to_image
from explorer.models import ExplorationNode
from explorer.status import TaskState, TaskStatus

ROOT_INDEX = -1


def create_placeholder_video(text="No Video"):
    """Create a 16:9 placeholder for a video that does not exist yet."""
    img = Image.new('RGB', (512, 288), color='#1F2937')
    draw = ImageDraw.Draw(img)

    draw.rectangle([(10, 10), (502, 278)], outline='#4B5563', width=3)

    # Play button icon
    center_x, center_y = 256, 134
    triangle = [
        (center_x - 30, center_y - 40),
        (center_x - 30, center_y + 40),
        (center_x + 40, center_y)
    ]
    draw.polygon(triangle, fill='#4B5563')
    draw.text((center_x, center_y + 70), text, fill='#9CA3AF', anchor='mt')

    return img


def show_video_preview(video_url: Optional[str], title: str, download_name: str) -> None:
    """Display a generated video with a download link, or a placeholder."""
    st.markdown(f"**{title}**")
    if video_url:
        st.video(video_url)
        st.link_button(f"📥 Download {download_name}", video_url)
    else:
        st.image(create_placeholder_video("No output"), use_container_width=True)


def show_status(task: TaskState) -> None:
    """Show the status message of a task; busy states get a spinner-style banner."""
    if task.status == TaskStatus.IDLE or not task.message:
        return
    if task.status == TaskStatus.ERROR:
        st.error(f"❌ {task.message}")
    elif task.status == TaskStatus.DONE:
        st.success(f"✅ {task.message}")
    else:
        st.info(f"⏳ {task.message}")


def show_breadcrumbs(nodes: Sequence[ExplorationNode], disabled: bool = False) -> Optional[int]:
    """
    Render the exploration trail as buttons.

    Args:
        nodes: Chain, root first
        disabled: Disable every crumb

    Returns:
        Index of the clicked node, ROOT_INDEX for the root, or None
    """
    clicked = None
    cols = st.columns(len(nodes) + 1)

    with cols[0]:
        if st.button("🏠 Root", key="crumb_root", disabled=disabled or not nodes, use_container_width=True):
            clicked = ROOT_INDEX

    for i, node in enumerate(nodes):
        with cols[i + 1]:
            label = node.prompt if len(node.prompt) <= 18 else node.prompt[:17] + "…"
            is_current = i == len(nodes) - 1
            if st.button(f"{i + 1}. {label}", key=f"crumb_{node.id}", help=node.prompt,
                         disabled=disabled or is_current, use_container_width=True,
                         type="primary" if is_current else "secondary"):
                clicked = i

    return clicked


def show_thumbnail_trail(nodes: Sequence[ExplorationNode], columns: int = 6) -> None:
    """Display the source frame of every node as a square thumbnail."""
    if not nodes:
        return

    cols = st.columns(columns)
    for i, node in enumerate(nodes):
        with cols[i % columns]:
            try:
                img = data_uri_to_image(node.source_frame_image)
            except (ValueError, OSError) as e:
                st.error(f"Cannot show frame {i + 1}: {e}")
                continue

            size = min(img.size)
            left = (img.width - size) // 2
            top = (img.height - size) // 2
            img_square = img.crop((left, top, left + size, top + size))
            img_square.thumbnail((200, 200), Image.Resampling.LANCZOS)
            st.image(img_square, caption=f"{i + 1}. {node.prompt}", use_container_width=True)
