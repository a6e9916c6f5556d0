# pages.py
# Inline page templates served by server.py.

GAME_HTML = r"""<!DOCTYPE html>
<html>
<head>
    <title>TypeRace</title>
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <style>
        :root {
            --bg: #111827; --panel: #1f2937; --line: #374151;
            --teal: #2dd4bf; --red: #ef4444; --blue: #3b82f6; --muted: #9ca3af;
        }
        body {
            font-family: 'Segoe UI', system-ui, sans-serif;
            background: var(--bg);
            color: white;
            margin: 0;
            padding: 32px;
        }
        .wrap { max-width: 900px; margin: 0 auto; }
        .panel {
            background: var(--panel);
            border: 1px solid var(--line);
            border-radius: 10px;
            padding: 24px;
            margin-bottom: 20px;
        }
        .hidden { display: none; }
        h1 { color: var(--teal); text-align: center; }
        input, textarea {
            width: 100%;
            box-sizing: border-box;
            padding: 12px;
            background: #0f172a;
            border: 1px solid var(--line);
            color: white;
            border-radius: 6px;
            font-size: 16px;
        }
        button {
            background: var(--teal);
            color: #000;
            border: none;
            padding: 12px 20px;
            border-radius: 6px;
            font-weight: bold;
            cursor: pointer;
            margin: 8px 8px 0 0;
        }
        button.secondary { background: #4b5563; color: white; }
        .error { color: var(--red); margin-top: 8px; }
        .lane {
            position: relative;
            height: 44px;
            background: #374151;
            border-radius: 6px;
            margin-bottom: 10px;
        }
        .car {
            position: absolute;
            top: 6px;
            width: 56px;
            height: 32px;
            border-radius: 6px;
            transition: left 0.1s linear;
        }
        .car.teal { background: var(--teal); }
        .car.red { background: var(--red); }
        .car.blue { background: var(--blue); }
        .lane-name { position: absolute; right: 10px; top: 12px; color: var(--muted); font-size: 13px; }
        .stats { display: flex; gap: 24px; color: var(--muted); margin-bottom: 12px; }
        .sentence { font-family: monospace; font-size: 20px; line-height: 1.6; margin-bottom: 12px; }
        .ok { color: var(--teal); }
        .bad { color: var(--red); background: rgba(239,68,68,0.2); }
        .status { margin-top: 12px; font-size: 18px; }
        table { width: 100%; border-collapse: collapse; }
        th, td { text-align: left; padding: 8px; border-bottom: 1px solid var(--line); }
    </style>
</head>
<body>
<div class="wrap">
    <h1>TypeRace</h1>

    <div id="userPanel" class="panel">
        <h2>Register your name</h2>
        <form id="userForm">
            <input id="username" type="text" placeholder="Your name" required>
            <div id="userError" class="error"></div>
            <button id="userSubmit" type="submit">Start</button>
        </form>
    </div>

    <div id="boardPanel" class="panel hidden">
        <h2>Leaderboard</h2>
        <table>
            <thead><tr><th>#</th><th>Name</th><th>WPM</th><th>Date</th><th>Result</th></tr></thead>
            <tbody id="boardBody"></tbody>
        </table>
        <button class="secondary" onclick="hideBoard()">Back</button>
        <button onclick="newUser()">New user</button>
    </div>

    <div id="racePanel" class="panel hidden">
        <div class="stats">
            <div>Attempt: <b id="attempts">1</b>/<span id="maxAttempts">3</span></div>
            <div>WPM: <b id="wpm">0</b></div>
            <div id="bestBox">Best: <b id="best">0</b></div>
            <div id="paceBox"></div>
        </div>
        <div id="track"></div>

        <div id="intro">
            <p>Race the AI cars! Type the text as fast as you can to move your car. First to finish wins!</p>
            <button onclick="prepareRace()">Ready to race</button>
            <button class="secondary" onclick="showBoard()">View leaderboard</button>
        </div>

        <div id="typing" class="hidden">
            <div id="sentence" class="sentence"></div>
            <textarea id="input" rows="3" placeholder="Start typing to begin the race..."></textarea>
            <div id="status" class="status"></div>
            <div id="after" class="hidden">
                <button onclick="prepareRace()">Race again</button>
                <button class="secondary" onclick="finishEarly()">Finish and save</button>
            </div>
        </div>
    </div>
</div>

<script>
    let sessionId = null;
    let session = null;
    let poller = null;

    function el(id) { return document.getElementById(id); }

    async function api(method, url, body) {
        const opts = { method: method, headers: { 'Content-Type': 'application/json' } };
        if (body !== undefined) opts.body = JSON.stringify(body);
        const res = await fetch(url, opts);
        const data = await res.json().catch(function() { return {}; });
        if (!res.ok) {
            const err = new Error(data.detail || data.error || 'Request failed');
            err.status = res.status;
            throw err;
        }
        return data;
    }

    el('userForm').addEventListener('submit', async function(e) {
        e.preventDefault();
        el('userError').textContent = '';
        el('userSubmit').disabled = true;
        try {
            session = await api('POST', '/api/session', { username: el('username').value });
            sessionId = session.id;
            el('userPanel').classList.add('hidden');
            el('racePanel').classList.remove('hidden');
            renderSession(session);
        } catch (err) {
            console.error('Error creating session:', err);
            el('userError').textContent = err.message;
        } finally {
            el('userSubmit').disabled = false;
        }
    });

    function renderSession(s) {
        el('attempts').textContent = s.attempts;
        el('maxAttempts').textContent = s.max_attempts;
        el('best').textContent = s.best_wpm;
        el('bestBox').classList.toggle('hidden', s.best_wpm <= 0);
        if (s.pace) {
            el('paceBox').textContent = 'Beat the AI: ~' + s.pace.wpm_to_win + ' WPM';
        }
        if (s.race) renderRace(s.race);
        if (s.showing_leaderboard) renderBoard(s.leaderboard || []);
    }

    function renderRace(r) {
        const track = el('track');
        track.innerHTML = '';
        r.participants.forEach(function(p) {
            const lane = document.createElement('div');
            lane.className = 'lane';
            const car = document.createElement('div');
            car.className = 'car ' + p.color;
            car.style.left = 'calc((100% - 56px) * ' + (p.position / 100) + ')';
            const name = document.createElement('div');
            name.className = 'lane-name';
            name.textContent = p.name;
            lane.appendChild(car);
            lane.appendChild(name);
            track.appendChild(lane);
        });

        const box = el('sentence');
        box.textContent = '';
        const typed = r.typed;
        for (let i = 0; i < r.sentence.length; i++) {
            const span = document.createElement('span');
            span.textContent = r.sentence[i] === ' ' ? '\u00a0' : r.sentence[i];
            if (i < typed.length) {
                span.className = typed[i] === r.sentence[i] ? 'ok' : 'bad';
            }
            box.appendChild(span);
        }
        el('wpm').textContent = r.wpm;

        const input = el('input');
        input.disabled = r.status === 'finished';
        if (r.status === 'ready') {
            el('status').textContent = 'Start typing to begin the race!';
        } else if (r.status === 'running') {
            el('status').textContent = 'Go! Go! Go!';
        } else {
            el('status').textContent = r.won ? 'You won the race! Congratulations!' : 'You lost the race. Try again!';
            el('after').classList.remove('hidden');
            stopPolling();
            refreshSession();
        }
    }

    function startPolling() {
        if (poller) return;
        poller = setInterval(async function() {
            try {
                renderRace(await api('GET', '/api/session/' + sessionId + '/race'));
            } catch (err) {
                console.error('Error polling race:', err);
                stopPolling();
            }
        }, 100);
    }

    function stopPolling() {
        if (poller) clearInterval(poller);
        poller = null;
    }

    async function refreshSession() {
        try {
            session = await api('GET', '/api/session/' + sessionId);
            el('best').textContent = session.best_wpm;
            el('bestBox').classList.toggle('hidden', session.best_wpm <= 0);
        } catch (err) {
            console.error('Error loading session:', err);
        }
    }

    el('input').addEventListener('input', async function(e) {
        try {
            const r = await api('POST', '/api/session/' + sessionId + '/race/input', { text: e.target.value });
            if (r.status === 'running') startPolling();
            renderRace(r);
        } catch (err) {
            console.error('Error sending input:', err);
            el('status').textContent = 'Connection problem, please try again.';
        }
    });

    async function prepareRace() {
        stopPolling();
        try {
            session = await api('POST', '/api/session/' + sessionId + '/race');
            el('input').value = '';
            el('after').classList.add('hidden');
            el('intro').classList.add('hidden');
            el('typing').classList.remove('hidden');
            renderSession(session);
            if (!session.showing_leaderboard) el('input').focus();
        } catch (err) {
            console.error('Error preparing race:', err);
            el('status').textContent = 'Could not start a race: ' + err.message;
        }
    }

    async function finishEarly() {
        stopPolling();
        try {
            const data = await api('POST', '/api/session/' + sessionId + '/finish');
            renderBoard(data.leaderboard);
        } catch (err) {
            console.error('Error saving score:', err);
            el('status').textContent = 'Could not save your score.';
        }
    }

    async function showBoard() {
        try {
            renderBoard(await api('GET', '/api/leaderboard'));
        } catch (err) {
            console.error('Error loading leaderboard:', err);
            renderBoard([]);
        }
    }

    function renderBoard(rows) {
        const body = el('boardBody');
        body.innerHTML = '';
        if (!rows.length) {
            body.innerHTML = '<tr><td colspan="5">No scores yet. Be the first to play!</td></tr>';
        }
        rows.forEach(function(row, idx) {
            const tr = document.createElement('tr');
            [idx + 1, row.username, row.wpm, row.date, row.won ? 'Win' : 'Loss'].forEach(function(value) {
                const td = document.createElement('td');
                td.textContent = value;
                tr.appendChild(td);
            });
            body.appendChild(tr);
        });
        el('racePanel').classList.add('hidden');
        el('boardPanel').classList.remove('hidden');
    }

    function hideBoard() {
        el('boardPanel').classList.add('hidden');
        if (sessionId) {
            el('racePanel').classList.remove('hidden');
        } else {
            el('userPanel').classList.remove('hidden');
        }
    }

    async function newUser() {
        stopPolling();
        if (sessionId) {
            try {
                await api('DELETE', '/api/session/' + sessionId);
            } catch (err) {
                console.error('Error closing session:', err);
            }
        }
        sessionId = null;
        session = null;
        el('username').value = '';
        el('input').value = '';
        el('intro').classList.remove('hidden');
        el('typing').classList.add('hidden');
        el('after').classList.add('hidden');
        el('boardPanel').classList.add('hidden');
        el('racePanel').classList.add('hidden');
        el('userPanel').classList.remove('hidden');
    }
</script>
</body>
</html>
"""

ADMIN_HTML = r"""<!DOCTYPE html>
<html>
<head>
    <title>TypeRace Admin</title>
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <style>
        body { font-family: 'Segoe UI', system-ui, sans-serif; background: #f3f4f6; margin: 0; padding: 32px; }
        .card { max-width: 900px; margin: 0 auto; background: white; border-radius: 10px; padding: 24px;
                box-shadow: 0 4px 15px rgba(0,0,0,0.1); }
        .hidden { display: none; }
        input { padding: 8px; border: 1px solid #d1d5db; border-radius: 4px; margin-right: 6px; }
        button { padding: 8px 14px; border: none; border-radius: 4px; cursor: pointer; margin: 4px; }
        .primary { background: #2563eb; color: white; }
        .danger { background: #dc2626; color: white; }
        table { width: 100%; border-collapse: collapse; margin: 16px 0; }
        th, td { text-align: left; padding: 8px; border-bottom: 1px solid #e5e7eb; }
        .message { margin: 12px 0; color: #1d4ed8; }
        .error { color: #dc2626; }
    </style>
</head>
<body>
<div class="card">
    <div id="login">
        <h1>Admin Access</h1>
        <form id="loginForm">
            <input id="password" type="password" placeholder="Password" required>
            <button class="primary" type="submit">Log in</button>
            <div id="loginError" class="error"></div>
        </form>
    </div>

    <div id="panel" class="hidden">
        <h1>Leaderboard Admin</h1>
        <div id="message" class="message"></div>
        <table>
            <thead><tr><th>Name</th><th>WPM</th><th>Date</th><th>Result</th><th></th></tr></thead>
            <tbody id="rows"></tbody>
        </table>
        <h3 id="formTitle">Add entry</h3>
        <input id="fUser" placeholder="Username">
        <input id="fWpm" type="number" min="0" placeholder="WPM">
        <input id="fDate" placeholder="Date">
        <label><input id="fWon" type="checkbox" checked> Won</label>
        <button class="primary" onclick="submitEntry()">Apply</button>
        <button onclick="cancelEdit()">Cancel</button>
        <hr>
        <button class="primary" onclick="saveAll()">Save changes</button>
        <button class="danger" onclick="resetAll()">Reset leaderboard</button>
    </div>
</div>

<script>
    let rows = [];
    let editing = null;

    function el(id) { return document.getElementById(id); }
    function say(text) { el('message').textContent = text; }

    el('loginForm').addEventListener('submit', async function(e) {
        e.preventDefault();
        el('loginError').textContent = '';
        try {
            const res = await fetch('/api/admin/auth', {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify({ password: el('password').value })
            });
            const data = await res.json();
            if (!data.success) {
                el('loginError').textContent = data.message || 'Invalid password';
                return;
            }
            el('login').classList.add('hidden');
            el('panel').classList.remove('hidden');
            load();
        } catch (err) {
            console.error('Error authenticating:', err);
            el('loginError').textContent = 'Authentication failed';
        }
    });

    async function load() {
        try {
            const res = await fetch('/api/leaderboard');
            if (!res.ok) throw new Error('Failed to fetch leaderboard');
            rows = await res.json();
            render();
        } catch (err) {
            console.error('Error fetching leaderboard:', err);
            say('Error loading leaderboard.');
        }
    }

    function render() {
        const body = el('rows');
        body.innerHTML = '';
        rows.forEach(function(r, idx) {
            const tr = document.createElement('tr');
            [r.username, r.wpm, r.date, r.won ? 'Win' : 'Loss'].forEach(function(value) {
                const td = document.createElement('td');
                td.textContent = value;
                tr.appendChild(td);
            });
            const actions = document.createElement('td');
            const edit = document.createElement('button');
            edit.textContent = 'Edit';
            edit.addEventListener('click', function() { startEdit(idx); });
            const del = document.createElement('button');
            del.className = 'danger';
            del.textContent = 'Delete';
            del.addEventListener('click', function() { removeRow(idx); });
            actions.appendChild(edit);
            actions.appendChild(del);
            tr.appendChild(actions);
            body.appendChild(tr);
        });
    }

    function startEdit(idx) {
        editing = idx;
        const r = rows[idx];
        el('fUser').value = r.username;
        el('fWpm').value = r.wpm;
        el('fDate').value = r.date;
        el('fWon').checked = r.won;
        el('formTitle').textContent = 'Edit entry';
    }

    function cancelEdit() {
        editing = null;
        el('fUser').value = '';
        el('fWpm').value = '';
        el('fDate').value = '';
        el('fWon').checked = true;
        el('formTitle').textContent = 'Add entry';
    }

    function submitEntry() {
        const entry = {
            username: el('fUser').value.trim(),
            wpm: parseInt(el('fWpm').value, 10),
            date: el('fDate').value.trim(),
            won: el('fWon').checked
        };
        if (!entry.username || isNaN(entry.wpm) || !entry.date) {
            say('Please fill in all fields');
            return;
        }
        if (editing === null) {
            rows.push(entry);
            say('New entry added. Click "Save changes" to persist.');
        } else {
            rows[editing] = entry;
            say('Entry updated. Click "Save changes" to persist.');
        }
        rows.sort(function(a, b) { return b.wpm - a.wpm; });
        cancelEdit();
        render();
    }

    function removeRow(idx) {
        rows.splice(idx, 1);
        render();
        say('Entry removed. Click "Save changes" to persist.');
    }

    async function saveAll() {
        try {
            const res = await fetch('/api/leaderboard', {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify(rows)
            });
            if (!res.ok) throw new Error('Failed to save leaderboard');
            const data = await res.json();
            say(data.warning ? 'Saved, but: ' + data.warning : 'Leaderboard saved successfully.');
            load();
        } catch (err) {
            console.error('Error saving leaderboard:', err);
            say('Error saving leaderboard. Please try again.');
        }
    }

    async function resetAll() {
        if (!confirm('Are you sure you want to reset the leaderboard? This action cannot be undone.')) return;
        try {
            const res = await fetch('/api/leaderboard/reset', { method: 'DELETE' });
            if (!res.ok) throw new Error('Failed to reset leaderboard');
            rows = [];
            render();
            say('Leaderboard has been reset successfully.');
        } catch (err) {
            console.error('Error resetting leaderboard:', err);
            say('Error resetting leaderboard. Please try again.');
        }
    }
</script>
</body>
</html>
"""
