import os, requests, streamlit as st

st.set_page_config(page_title="Dating Photo Coach", layout="wide")
st.title("Dating Photo Coach")

API_BASE = os.getenv("API_BASE", "http://127.0.0.1:8001")

uploaded = st.file_uploader(
    "Upload your profile photos",
    type=["jpg", "jpeg", "png", "webp"],
    accept_multiple_files=True
)
with_tips = st.checkbox("Generate coaching tips", value=True)
analyze = st.button("Analyze")

def call_api(files, feedback: bool):
    fs = [("files", (f.name, f.getvalue(), f.type or "image/jpeg")) for f in files]
    r = requests.post(API_BASE + "/analyze", files=fs,
                      params={"feedback": str(feedback).lower()}, timeout=600)
    if not r.ok:
        st.error(f"/analyze → {r.status_code}: {r.text}")
        r.raise_for_status()
    return r.json()

if uploaded and analyze:
    with st.spinner("Scoring photos..."):
        data = call_api(uploaded, with_tips)

    overall = data["overall"]
    c1, c2, c3 = st.columns(3)
    c1.metric("Profile score", overall["profile_score"])
    c2.metric("Best-six score", overall["selected_profile_score"])
    c3.metric("Failed photos", overall["failed_count"])

    items = {item["index"]: item for item in data["items"]}

    st.subheader("Suggested order")
    cols = st.columns(max(1, len(data["order"])))
    for pos, idx in enumerate(data["order"]):
        item = items[idx]
        cols[pos].image(uploaded[idx].getvalue(), caption=f"#{pos + 1} · {item['score']}", use_column_width=True)

    st.subheader("Per-photo feedback")
    for item in data["items"]:
        st.markdown(f"**{item['filename']}** · {item['role']} · score {item['score']}")
        c1, c2 = st.columns([1, 2])
        c1.image(uploaded[item["index"]].getvalue(), use_column_width=True)
        if item.get("error"):
            c2.warning(item["error"])
        else:
            c2.write(item["assessment"])
            for line in item["feedback"]:
                c2.write(line)
else:
    st.info("Upload images to enable analysis.")
