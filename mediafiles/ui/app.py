"""Media Files -- Streamlit UI.

Browse, upload, delete and preview media files with their transcripts,
recognition labels and EXIF metadata.
"""

from __future__ import annotations

import pandas as pd
import streamlit as st

from mediafiles.ui.api_client import (
    check_health,
    delete_files,
    dismiss_uploads,
    get_files,
    get_preview,
    get_upload_progress,
    upload_files,
)

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(page_title="Media Files", layout="wide")


def show_notices(notices: list[dict]) -> None:  # type: ignore[type-arg]
    for notice in notices:
        text = notice["message"]
        if notice.get("title"):
            text = f"**{notice['title']}**  \n{text}"
        if notice["level"] == "error":
            st.error(text)
        elif notice["level"] == "success":
            st.success(text)
        else:
            st.info(text)


# ---------------------------------------------------------------------------
# Sidebar -- API status + upload
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("Media Files")
    st.markdown("---")

    api_healthy = check_health()
    if api_healthy:
        st.markdown(":green_circle: API connected")
    else:
        st.markdown(":red_circle: API unreachable")

    st.markdown("---")
    st.subheader("Upload")
    chosen = st.file_uploader("Choose files", accept_multiple_files=True)
    if st.button("Upload", disabled=not chosen or not api_healthy):
        result = upload_files([(f.name, f.getvalue(), f.type) for f in chosen])
        if result:
            show_notices(result.get("notices", []))
            st.session_state["uploading"] = True

    if st.session_state.get("uploading"):
        progress = get_upload_progress()
        show_notices(progress.get("notices", []))
        for item in progress.get("uploads", []):
            label = f"{item['name']} {item['loaded']} / {item['total']}"
            if item["failed"]:
                label = f"{item['name']} failed: {item['error']}"
            st.progress(item["progress"] / 100, text=label)
        col_refresh, col_done = st.columns(2)
        col_refresh.button("Refresh progress")
        if col_done.button("Done" if progress.get("finished") else "Close"):
            show_notices(dismiss_uploads().get("notices", []))
            st.session_state["uploading"] = False

# ---------------------------------------------------------------------------
# File list
# ---------------------------------------------------------------------------
st.header("Files")

if not api_healthy:
    st.warning("The API server is not reachable. Cannot load files.")
    st.stop()

catalog = get_files()
show_notices(catalog.get("notices", []))
files = catalog.get("files", [])

if not files:
    st.info("No files found. Upload a file to get started.")
    st.stop()

table = pd.DataFrame(
    [
        {
            "Select": False,
            "Name": f["display_name"] + (" (redacted)" if f["is_redacted"] else ""),
            "Type": f["kind"],
            "Size": f["size"],
            "Last modified": f["last_modified"],
            "Link": f["signed_url"],
        }
        for f in files
    ]
)
edited = st.data_editor(
    table,
    column_config={"Link": st.column_config.LinkColumn("Link", display_text="Download")},
    disabled=["Name", "Type", "Size", "Last modified", "Link"],
    hide_index=True,
    use_container_width=True,
)
selected_keys = [f["key"] for f, row in zip(files, edited["Select"]) if row]

if st.button("Delete selected", disabled=not selected_keys):
    result = delete_files(selected_keys)
    if result:
        show_notices(result.get("notices", []))
        st.rerun()

# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------
viewable = {f["name"]: f["key"] for f in files if f["viewable"]}
if viewable:
    st.markdown("---")
    st.subheader("Preview")
    name = st.selectbox("File", options=list(viewable.keys()))
    if name and st.button("View"):
        preview = get_preview(viewable[name])
        media = preview.get("media")
        image = preview.get("image")

        if media:
            if media["kind"] == "video":
                st.video(media["url"])
            else:
                st.audio(media["url"])
            if media["has_transcription"]:
                if media.get("transcript_document_url"):
                    st.markdown(f"[Transcript document]({media['transcript_document_url']})")
                for block in media["blocks"]:
                    words = " ".join(
                        f"~~{w['text']}~~" if w["is_redacted"] else w["text"] for w in block["words"]
                    )
                    st.markdown(f"**{block['id']}** {words}")
            else:
                st.write("No transcription available.")

        if image:
            st.image(image["url"], caption=image["name"])
            if image["has_lat_long"]:
                coords = image["coordinates"]
                st.map(pd.DataFrame([{"lat": coords["latitude"], "lon": coords["longitude"]}]))
            if image["has_recognition"]:
                st.subheader("Labels")
                st.write(", ".join(f"{lbl['word']} ({lbl['confidence_percent']}%)" for lbl in image["labels"]))
            if image["has_metadata"]:
                st.subheader("Metadata")
                st.table(pd.DataFrame([{"Key": m["key"], "Value": m["value"]} for m in image["metadata"]]))
