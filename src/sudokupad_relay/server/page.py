from __future__ import annotations

# ruff: noqa: E501


def render_index_html() -> str:
    """
    Login form plus the embedded private view.

    Identity lives in the browser's localStorage; the server only ever sees
    the resolved room id and user info on `/api/connect`.
    """
    # NOTE: Intentionally one big string; logic stays in the JS functions below.
    return """
<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width,initial-scale=1" />
    <title>sudokupad-relay</title>
    <style>
      html, body { height: 100%; margin: 0; background: #0b0f14; color: #e6edf3; font-family: ui-sans-serif, system-ui, -apple-system; }
      #bar { display: flex; gap: 8px; align-items: center; padding: 8px 12px; border-bottom: 1px solid rgba(255,255,255,0.08); }
      #bar input { padding: 6px 8px; border-radius: 6px; border: 1px solid rgba(255,255,255,0.12); background: rgba(255,255,255,0.06); color: #e6edf3; }
      #bar button { padding: 6px 10px; border-radius: 6px; border: 1px solid rgba(255,255,255,0.16); background: rgba(255,255,255,0.10); color: #e6edf3; cursor: pointer; }
      #status { font-size: 12px; opacity: 0.8; margin-left: auto; }
      #sudokupad { border: 0; width: 100%; height: calc(100% - 48px); }
    </style>
  </head>
  <body>
    <form id="loginForm" autocomplete="off">
      <div id="bar">
        <input id="roomId" name="roomId" placeholder="room" required />
        <input id="name" name="name" placeholder="name" required />
        <input id="color" name="color" type="color" value="#7ee787" />
        <button type="submit">Join</button>
        <label><input id="sendPointer" type="checkbox" checked /> send pointer</label>
        <label><input id="showPointers" type="checkbox" checked /> show pointers</label>
        <span id="status">not connected</span>
      </div>
    </form>
    <iframe id="sudokupad"></iframe>
    <script>
      const statusEl = document.getElementById("status");
      const iframe = document.getElementById("sudokupad");

      async function post(path, body) {
        const resp = await fetch(path, {
          method: "POST",
          headers: {"Content-Type": "application/json"},
          body: JSON.stringify(body || {}),
        });
        if (!resp.ok) throw new Error(`${path}: HTTP ${resp.status}`);
        return resp.json();
      }

      async function connect(roomId, userInfo) {
        statusEl.textContent = "connecting…";
        const res = await post("/api/connect", {roomId, ...userInfo});
        localStorage.setItem("roomId", roomId);
        localStorage.setItem("userInfo", JSON.stringify(res.userInfo));
        iframe.src = res.url;
        statusEl.textContent = res.connected ? `room ${roomId}` : `room ${roomId} (channel connect failed)`;
      }

      // ask other clients to send us the up-to-date state
      iframe.addEventListener("load", () => {
        if (iframe.src) post("/api/ready").catch(e => console.error(e));
      });

      document.getElementById("loginForm").addEventListener("submit", async event => {
        event.preventDefault();
        const form = new FormData(event.target);
        // no userId: the server picks a fresh one per join
        const userInfo = {key: "1", name: form.get("name"), color: form.get("color")};
        try {
          await connect(form.get("roomId"), userInfo);
        } catch (e) {
          statusEl.textContent = "connect failed";
          console.error(e);
        }
      });

      for (const id of ["sendPointer", "showPointers"]) {
        document.getElementById(id).addEventListener("change", event => {
          post("/api/settings", {[id]: event.target.checked}).catch(e => console.error(e));
        });
      }

      window.addEventListener("beforeunload", () => {
        navigator.sendBeacon("/api/disconnect");
      });

      (async () => {
        const roomId = localStorage.getItem("roomId");
        const userInfo = JSON.parse(localStorage.getItem("userInfo") || "null");
        if (!roomId || !userInfo) return;
        document.getElementById("roomId").value = roomId;
        document.getElementById("name").value = userInfo.name;
        document.getElementById("color").value = userInfo.color;
        try {
          await connect(roomId, userInfo);
        } catch (e) {
          statusEl.textContent = "connect failed";
          console.error(e);
        }
      })();
    </script>
  </body>
</html>
"""
