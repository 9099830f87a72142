"""HTML rendering for the tour lead form page."""

import html as html_module

from straqa.models.country import CountryOption
from straqa.services.validation import BoundField

# Layout metadata
SITE_METADATA = {
    "title": "Straqa",
    "description": "Ticket experience made easy",
    "author": "All-in Technologies",
    "author_url": "lifewithallin.com",
    "publisher": "All-in Technologies",
    "twitter_card": "summary_large_image",
    "twitter_creator": "@straqa",
}

PAGE_HEADING = "121 selah - Finding home Tour!"

INPUT_CLASSES = (
    "w-full px-4 py-3 border border-gray-300 rounded-lg text-black "
    "focus:ring-2 focus:ring-indigo-500 focus:border-indigo-500 transition-colors"
)


def _escape_html(value: str | None) -> str:
    """Escape a value for safe HTML insertion."""
    if value is None:
        return ""
    return html_module.escape(str(value))


def _escape_js_string(s: str) -> str:
    """Escape a string for a single-quoted JavaScript literal."""
    if not s:
        return ""
    return (
        s.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("</script>", "<\\/script>")
    )


def render_country_options(countries: tuple[CountryOption, ...], selected: str) -> str:
    """Render ``<option>`` tags showing flag, name and dial code."""
    return "".join(
        f'<option value="{_escape_html(c.code)}"{" selected" if c.code == selected else ""}>'
        f"{c.flag} {_escape_html(c.label)} {_escape_html(c.dial_prefix)}</option>"
        for c in countries
    )


def _render_error(field: BoundField) -> str:
    hidden = "" if field.error else " hidden"
    return (
        f'<p data-error-for="{_escape_html(field.spec.name)}" '
        f'class="text-sm text-red-600 mt-1{hidden}">{_escape_html(field.error)}</p>'
    )


def _render_label(field: BoundField) -> str:
    star = '<span class="text-primary">*</span>' if field.spec.required else ""
    return (
        f'<label for="field-{_escape_html(field.spec.name)}" '
        f'class="block text-sm font-medium mb-1">{star}{_escape_html(field.spec.label)}</label>'
    )


def render_field_html(
    field: BoundField,
    countries: tuple[CountryOption, ...] = (),
    default_country: str = "NG",
) -> str:
    """Render one bound field with its label and inline error slot."""
    spec = field.spec
    name = _escape_html(spec.name)
    value = _escape_html(field.value)

    if spec.widget == "textarea":
        control = f'<textarea id="field-{name}" name="{name}" rows="4" class="{INPUT_CLASSES}">{value}</textarea>'
    elif spec.widget == "phone":
        options_html = render_country_options(countries, default_country)
        control = f'''<div class="flex">
                    <select name="{name}_country" aria-label="Country" data-country-select
                        class="rounded-s-md border border-gray-300 px-3 py-2 max-w-[9rem]">{options_html}</select>
                    <input type="tel" id="field-{name}" name="{name}" value="{value}" placeholder="2340000000000"
                        class="{INPUT_CLASSES} border-l-0 rounded-s-none">
                </div>'''
    elif spec.widget == "file":
        accept = f' accept="{_escape_html(spec.accept)}"' if spec.accept else ""
        control = f'<input type="file" id="field-{name}" name="{name}"{accept} class="{INPUT_CLASSES} h-auto">'
    else:
        input_type = "email" if spec.widget == "email" else "text"
        control = f'<input type="{input_type}" id="field-{name}" name="{name}" value="{value}" class="{INPUT_CLASSES}">'

    return f'''
            <div class="mb-4">
                {_render_label(field)}
                {control}
                {_render_error(field)}
            </div>'''


def render_form_html(
    fields: list[BoundField],
    form_id: str,
    countries: tuple[CountryOption, ...],
    default_country: str = "NG",
) -> str:
    """Render the lead form."""
    fields_html = "".join(
        render_field_html(field, countries, default_country) for field in fields
    )
    return f'''
        <form id="{_escape_html(form_id)}" data-straqa-form class="w-full space-y-6" novalidate>
            <div class="space-y-3">{fields_html}
            </div>
            <p data-form-error class="text-sm text-red-600 hidden"></p>
            <button type="submit" class="w-full py-4 h-auto text-white bg-primary rounded-lg flex items-center justify-center gap-2">
                <span data-spinner class="hidden animate-spin size-4 border-2 border-white border-t-transparent rounded-full"></span>
                <span>Submit</span>
            </button>
        </form>'''


def _render_form_script(api_url: str, loading_delay_ms: int) -> str:
    api_url_safe = _escape_js_string(api_url) if api_url.startswith(("https://", "http://")) else ""
    return f"""
<script>
(function() {{
  const API_URL = '{api_url_safe}';
  const LOADING_DELAY = {loading_delay_ms};
  const form = document.querySelector('form[data-straqa-form]');
  const spinner = form.querySelector('[data-spinner]');
  const formError = form.querySelector('[data-form-error]');
  const toaster = document.getElementById('toaster');
  let inFlight = false;

  function toast(title) {{
    const el = document.createElement('div');
    el.className = 'bg-white text-black shadow-lg rounded-lg px-4 py-3';
    el.textContent = title;
    toaster.appendChild(el);
    setTimeout(function() {{ el.remove(); }}, 4000);
  }}

  function showErrors(errors) {{
    form.querySelectorAll('[data-error-for]').forEach(function(el) {{
      const message = errors[el.dataset.errorFor];
      el.textContent = message || '';
      el.classList.toggle('hidden', !message);
    }});
  }}

  function setFormError(message) {{
    formError.textContent = message || '';
    formError.classList.toggle('hidden', !message);
  }}

  function readFile(file) {{
    return new Promise(function(resolve, reject) {{
      const reader = new FileReader();
      reader.onload = function() {{ reader.result ? resolve(reader.result.toString()) : reject(); }};
      reader.onerror = function() {{ reject(); }};
      reader.readAsDataURL(file);
    }});
  }}

  form.addEventListener('submit', async function(e) {{
    e.preventDefault();
    if (inFlight) return;
    inFlight = true;
    setFormError('');

    const data = {{
      name: form.elements.name.value,
      email: form.elements.email.value,
      tel: form.elements.tel.value,
      tel_country: form.elements.tel_country.value,
      experience: form.elements.experience.value,
    }};

    const file = form.elements.upload.files[0];
    if (file) {{
      try {{
        data.upload = {{ filename: file.name, content_type: file.type, data_base64: await readFile(file) }};
      }} catch (err) {{
        console.error('Error converting file:', err);
        setFormError('File upload failed.');
        inFlight = false;
        return;
      }}
    }}

    const loadingTimer = setTimeout(function() {{ spinner.classList.remove('hidden'); }}, LOADING_DELAY);
    try {{
      const res = await fetch(API_URL + '/submit', {{
        method: 'POST',
        headers: {{ 'Content-Type': 'application/json' }},
        body: JSON.stringify(data)
      }});
      const result = await res.json();
      if (res.status >= 400) {{
        const errors = {{}};
        ((result.details || {{}}).errors || []).forEach(function(err) {{ errors[err.field] = err.message; }});
        showErrors(errors);
        if (!Object.keys(errors).length) setFormError(result.message || 'Internal Server Error');
        return;
      }}
      showErrors({{}});
      toast(result.message || 'Success');
      form.reset();
    }} catch (err) {{
      console.warn(err);
      setFormError('Something went wrong.');
    }} finally {{
      clearTimeout(loadingTimer);
      spinner.classList.add('hidden');
      inFlight = false;
    }}
  }});
}})();
</script>"""


def render_full_page(
    fields: list[BoundField],
    form_id: str,
    countries: tuple[CountryOption, ...],
    api_url: str,
    default_country: str = "NG",
    loading_delay: float = 1.0,
) -> str:
    """Render the lead form page to a complete HTML document.

    Args:
        fields: Bound fields in display order.
        form_id: CMS form ID, used as the form element ID.
        countries: Options for the phone country selector.
        api_url: Base URL the page script posts submissions to.
        default_country: Preselected phone country.
        loading_delay: Seconds before the submit spinner appears.

    Returns:
        Complete HTML document string.
    """
    meta = {key: _escape_html(value) for key, value in SITE_METADATA.items()}
    form_html = render_form_html(fields, form_id, countries, default_country)
    form_script = _render_form_script(api_url, int(loading_delay * 1000))

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{meta["title"]}</title>
    <meta name="description" content="{meta["description"]}">
    <meta name="author" content="{meta["author"]}">
    <meta name="publisher" content="{meta["publisher"]}">
    <link rel="author" href="https://{meta["author_url"]}">
    <meta name="twitter:card" content="{meta["twitter_card"]}">
    <meta name="twitter:creator" content="{meta["twitter_creator"]}">
    <link href="/favicon.ico" rel="icon" sizes="32x32">
    <link href="/favicon.svg" rel="icon" type="image/svg+xml">
    <script src="https://cdn.tailwindcss.com"></script>
</head>
<body class="antialiased w-screen overflow-x-hidden">
<main class="w-screen lg:min-h-dvh">
    <section class="w-full max-w-screen-2xl mx-auto px-4 md:px-6 lg:px-8 py-8 lg:py-12 space-y-8">
        <div class="max-w-[580px] mx-auto gap-8">
            <div class="space-y-4 lg:space-y-6">
                <h1 class="text-xl lg:text-2xl xl:text-3xl font-bold text-center">{_escape_html(PAGE_HEADING)}</h1>
{form_html}
                <div class="flex flex-col gap-2 items-center justify-center opacity-75">
                    <img src="/favicon.ico" alt="logo" width="80" height="80" class="size-12">
                    <p>Powered by Straqa</p>
                </div>
            </div>
        </div>
    </section>
</main>
<div id="toaster" aria-live="polite" class="fixed bottom-4 right-4 space-y-2 z-50"></div>
{form_script}
</body>
</html>"""
