"""Single-page front end served by the API."""

INDEX_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>NutriSnap</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      nav button { margin-right: 0.5rem; }
      .row { margin-bottom: 1rem; }
      .card { border: 1px solid #ddd; border-radius: 8px; padding: 1rem; }
      .error { color: #b91c1c; }
      .muted { color: #6b7280; }
      input, textarea { padding: 0.4rem 0.6rem; }
      textarea { width: 100%; max-width: 640px; height: 5rem; }
      button { padding: 0.4rem 0.8rem; }
      li { margin-bottom: 0.3rem; }
      [hidden] { display: none; }
    </style>
  </head>
  <body>
    <h1>NutriSnap</h1>
    <p class="muted">Single-user server: every browser shares one session.</p>
    <nav class="row">
      <button onclick="show('home')">Home</button>
      <button id="nav-history" onclick="show('history')">History</button>
      <button id="nav-login" onclick="show('login')">Login</button>
      <button id="nav-logout" onclick="logout()" hidden>Logout</button>
      <span id="who"></span>
    </nav>
    <p id="error" class="error"></p>

    <section id="view-home">
      <div class="row">
        <textarea id="text" placeholder="E.g., 2 eggs and a slice of toast"></textarea>
      </div>
      <div class="row">
        <input id="date" type="date" />
        <button onclick="analyze()">Analyze</button>
      </div>
      <div id="current" class="card" hidden></div>
      <h3>Recent History</h3>
      <ul id="recent"></ul>
    </section>

    <section id="view-history" hidden>
      <h2>Your Meal History</h2>
      <div id="days"></div>
    </section>

    <section id="view-login" hidden>
      <div class="row"><input id="username" placeholder="Username" /></div>
      <div class="row">
        <input id="password" type="password" placeholder="Password" />
      </div>
      <button onclick="auth('login')">Login</button>
      <button onclick="auth('register')">Register</button>
    </section>

    <script>
      async function api(method, path, body) {
        const res = await fetch(path, {
          method,
          headers: { 'Content-Type': 'application/json' },
          body: body ? JSON.stringify(body) : undefined
        });
        const data = await res.json().catch(() => ({}));
        if (!res.ok) {
          const detail = typeof data.detail === 'string' ? data.detail : res.status;
          throw new Error(detail);
        }
        return data;
      }

      function setError(message) {
        document.getElementById('error').textContent = message || '';
      }

      async function guarded(action) {
        setError('');
        try { await action(); } catch (err) { setError(err.message); }
      }

      function renderSession(session) {
        for (const view of ['home', 'history', 'login']) {
          document.getElementById('view-' + view).hidden =
            session.currentView !== view;
        }
        document.getElementById('nav-login').hidden = session.loggedIn;
        document.getElementById('nav-logout').hidden = !session.loggedIn;
        document.getElementById('who').textContent =
          session.loggedIn ? 'Signed in as ' + session.username : '';
        if (session.currentView === 'history') loadHistory();
        if (session.currentView === 'home') loadHome();
      }

      function renderMeal(meal) {
        const items = meal.foodItems.map((item, index) =>
          `<li>${item.quantity} ${item.name}: ${item.calories} kcal
            <button onclick="editItem('${meal.id}', ${index})">Edit</button>
            <button onclick="removeItem('${meal.id}', ${index})">Remove</button>
          </li>`).join('');
        return `<h3>${meal.originalInput}</h3>
          <p><b>${meal.totalCalories} kcal</b> |
            ${meal.proteinGrams}g P (${meal.macros.proteinPct}%) |
            ${meal.carbsGrams}g C (${meal.macros.carbsPct}%) |
            ${meal.fatGrams}g F (${meal.macros.fatPct}%)</p>
          <ul>${items}</ul>
          <button onclick="addItem('${meal.id}')">Add item</button>
          <button onclick="deleteMeal('${meal.id}')">Delete meal</button>
          <p><i>${meal.healthTip}</i></p>`;
      }

      async function loadHome() {
        const current = await api('GET', '/meals/current');
        const card = document.getElementById('current');
        card.hidden = !current.meal;
        card.innerHTML = current.meal ? renderMeal(current.meal) : '';
        const recent = await api('GET', '/meals/recent');
        document.getElementById('recent').innerHTML = recent.meals.map(meal =>
          `<li><a href="#" onclick="select('${meal.id}')">${meal.originalInput}</a>
            (${meal.totalCalories} kcal)</li>`).join('');
      }

      async function loadHistory() {
        const history = await api('GET', '/meals/history');
        document.getElementById('days').innerHTML = history.days.map(day =>
          `<div class="card row"><h3>${day.label}: ${day.totals.calories} kcal</h3>
            <ul>${day.meals.map(meal =>
              `<li>${new Date(meal.timestamp).toLocaleTimeString()}
                ${meal.originalInput} (${meal.totalCalories} kcal)
                <button onclick="deleteMeal('${meal.id}')">Delete</button></li>`
            ).join('')}</ul></div>`).join('') || '<p>No meals logged yet.</p>';
      }

      const show = view => guarded(async () =>
        renderSession(await api('POST', '/session/view', { view })));
      const logout = () => guarded(async () =>
        renderSession(await api('POST', '/auth/logout')));
      const select = id => guarded(async () => {
        await api('POST', `/meals/${id}/select`);
        await loadHome();
      });

      function analyze() {
        guarded(async () => {
          const text = document.getElementById('text').value;
          const date = document.getElementById('date').value || null;
          await api('POST', '/meals', { text, date });
          await loadHome();
        });
      }

      function auth(action) {
        guarded(async () => {
          const username = document.getElementById('username').value;
          const password = document.getElementById('password').value;
          renderSession(await api('POST', '/auth/' + action, { username, password }));
        });
      }

      function editItem(id, index) {
        const quantity = prompt('New quantity');
        if (!quantity) return;
        guarded(async () => {
          await api('PATCH', `/meals/${id}/items/${index}`, { quantity });
          await loadHome();
        });
      }

      function addItem(id) {
        const name = prompt('Food name');
        const quantity = name && prompt('Quantity');
        if (!quantity) return;
        guarded(async () => {
          await api('POST', `/meals/${id}/items`, { name, quantity });
          await loadHome();
        });
      }

      function removeItem(id, index) {
        guarded(async () => {
          await api('DELETE', `/meals/${id}/items/${index}`);
          await loadHome();
        });
      }

      function deleteMeal(id) {
        if (!confirm('Delete this meal?')) return;
        guarded(async () => {
          await api('DELETE', `/meals/${id}`);
          renderSession(await api('GET', '/session'));
        });
      }

      guarded(async () => renderSession(await api('GET', '/session')));
    </script>
  </body>
</html>
"""
