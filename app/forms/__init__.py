from werkzeug.datastructures import MultiDict


def json_formdata(payload, prefix=""):
    """
    Flatten a JSON body into form data for WTForms.

    Nested objects map onto FormField prefixes, so
    {"home_stats": {"goals": 2}} becomes home_stats-goals=2.
    """
    formdata = MultiDict()
    if not isinstance(payload, dict):
        return formdata
    for key, value in payload.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            formdata.update(json_formdata(value, prefix=f"{name}-"))
        elif value is not None:
            formdata.add(name, str(value))
    return formdata
