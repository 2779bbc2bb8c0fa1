from django.shortcuts import redirect
from django.urls import Resolver404, resolve


def unknown_path(request, *args, **kwargs):
    """
    Redirect unknown paths to the sign-in page. A known route typed without
    its trailing slash is sent to the slashed form instead.
    """
    path = request.path_info
    if not path.endswith('/'):
        try:
            match = resolve(path + '/')
        except Resolver404:
            match = None
        if match is not None and match.url_name != 'unknown':
            query = request.META.get('QUERY_STRING', '')
            return redirect(request.path + '/' + ('?' + query if query else ''))
    return redirect('accounts:auth')
