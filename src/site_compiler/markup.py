"""Escaping and small lookup helpers shared by every emitted file.

Each escaping function targets one output context. Using the wrong one is an
injection bug in the generated source, so templates always name the filter
explicitly (see ``templating.py``).
"""

from __future__ import annotations

from typing import Iterable, Mapping


def esc(text: object) -> str:
    """Escape text for a JSX text node."""
    return (
        str(text)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("{", "&#123;")
        .replace("}", "&#125;")
    )


def esc_attr(text: object) -> str:
    """Escape text for a double-quoted JSX attribute."""
    return (
        str(text)
        .replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def esc_tpl(text: object) -> str:
    """Escape text for a JS template literal."""
    return str(text).replace("\\", "\\\\").replace("`", "\\`").replace("$", "\\$")


def esc_str(text: object) -> str:
    """Escape text for a single-quoted JS string literal."""
    return str(text).replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")


ICON_MAP: Mapping[str, str] = {
    # general
    "star": "Star",
    "heart": "Heart",
    "check": "Check",
    "check-circle": "CheckCircle",
    "x": "X",
    "plus": "Plus",
    "minus": "Minus",
    "search": "Search",
    "menu": "Menu",
    "close": "X",
    "arrow_right": "ArrowRight",
    "arrow-right": "ArrowRight",
    "arrow-left": "ArrowLeft",
    "chevron-down": "ChevronDown",
    "chevron-right": "ChevronRight",
    "chevron-up": "ChevronUp",
    "external": "ExternalLink",
    # communication
    "phone": "Phone",
    "email": "Mail",
    "mail": "Mail",
    "message": "MessageCircle",
    "chat": "MessageCircle",
    "send": "Send",
    # location
    "location": "MapPin",
    "map": "MapPin",
    "map-pin": "MapPin",
    "globe": "Globe",
    "navigation": "Navigation",
    # time
    "clock": "Clock",
    "calendar": "Calendar",
    "timer": "Timer",
    # business
    "building": "Building",
    "briefcase": "Briefcase",
    "store": "Store",
    "shopping-cart": "ShoppingCart",
    "cart": "ShoppingCart",
    "credit-card": "CreditCard",
    "dollar": "DollarSign",
    "receipt": "Receipt",
    "package": "Package",
    "truck": "Truck",
    # tech
    "code": "Code",
    "terminal": "Terminal",
    "database": "Database",
    "cloud": "Cloud",
    "server": "Server",
    "cpu": "Cpu",
    "shield": "Shield",
    "lock": "Lock",
    "key": "Key",
    "wifi": "Wifi",
    "zap": "Zap",
    "lightning": "Zap",
    "rocket": "Rocket",
    "settings": "Settings",
    "tool": "Wrench",
    # content
    "image": "Image",
    "camera": "Camera",
    "video": "Video",
    "music": "Music",
    "file": "FileText",
    "book": "BookOpen",
    "pen": "Pen",
    "edit": "Edit",
    # people
    "user": "User",
    "users": "Users",
    "user-plus": "UserPlus",
    "award": "Award",
    "crown": "Crown",
    # social
    "share": "Share2",
    "link": "Link",
    "thumbs_up": "ThumbsUp",
    "thumbs-up": "ThumbsUp",
    # food
    "utensils": "UtensilsCrossed",
    "chef-hat": "ChefHat",
    "coffee": "Coffee",
    "wine": "Wine",
    "leaf": "Leaf",
    "flame": "Flame",
    # fitness
    "dumbbell": "Dumbbell",
    "activity": "Activity",
    "target": "Target",
    "trophy": "Trophy",
    # misc
    "sparkles": "Sparkles",
    "sun": "Sun",
    "moon": "Moon",
    "eye": "Eye",
    "download": "Download",
    "upload": "Upload",
    "refresh": "RefreshCw",
    "layers": "Layers",
    "grid": "Grid",
    "list": "List",
    "bar_chart": "BarChart3",
    "bar-chart": "BarChart3",
    "pie_chart": "PieChart",
    "trending_up": "TrendingUp",
    "trending-up": "TrendingUp",
    "layout": "Layout",
    "monitor": "Monitor",
    "smartphone": "Smartphone",
    "headphones": "Headphones",
    "gift": "Gift",
    "percent": "Percent",
    "tag": "Tag",
    "filter": "Filter",
    "home": "Home",
    "info": "Info",
    "help-circle": "HelpCircle",
    "alert": "AlertCircle",
    "bell": "Bell",
    "bookmark": "Bookmark",
    "flag": "Flag",
    "anchor": "Anchor",
    "compass": "Compass",
}

SOCIAL_ICONS: Mapping[str, str] = {
    "facebook": "Facebook",
    "twitter": "Twitter",
    "instagram": "Instagram",
    "linkedin": "Linkedin",
    "youtube": "Youtube",
    "github": "Github",
    "tiktok": "Music2",
    "pinterest": "Pin",
}


def resolve_icon(name: str | None) -> str:
    """Map a friendly icon name to a lucide-react component name."""
    if not name:
        return "Star"
    key = name.strip().lower()
    if key in ICON_MAP:
        return ICON_MAP[key]
    # Unknown names are passed through only when they already look like a component.
    candidate = name.strip()
    if candidate.isidentifier() and candidate[0].isupper():
        return candidate
    return "Star"


def resolve_social_icon(platform: str) -> str:
    return SOCIAL_ICONS.get(platform.strip().lower(), "Globe")


def collect_icons(names: Iterable[str | None], *extra: str) -> list[str]:
    """Unique lucide component names in first-seen order."""
    seen: dict[str, None] = {}
    for name in names:
        seen.setdefault(resolve_icon(name), None)
    for name in extra:
        seen.setdefault(name, None)
    return list(seen)


def collect_social_icons(platforms: Iterable[str], *extra: str) -> list[str]:
    seen: dict[str, None] = {}
    for platform in platforms:
        seen.setdefault(resolve_social_icon(platform), None)
    for name in extra:
        seen.setdefault(name, None)
    return list(seen)


def is_internal_href(href: str) -> bool:
    return href.startswith("/") or href.startswith("#")


__all__ = [
    "esc",
    "esc_attr",
    "esc_tpl",
    "esc_str",
    "ICON_MAP",
    "SOCIAL_ICONS",
    "resolve_icon",
    "resolve_social_icon",
    "collect_icons",
    "collect_social_icons",
    "is_internal_href",
]
