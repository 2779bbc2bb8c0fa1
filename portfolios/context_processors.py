from .services import portfolio_count as count_portfolios


def portfolio_count(request):
    """Number of portfolios the signed-in user owns, for the navbar."""
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return {}
    return {'portfolio_count': count_portfolios(user)}
