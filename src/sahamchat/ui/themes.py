"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Brand palette: deep blue primary with emerald accents on a dark surface
SAHAM_CERDAS = Theme(
    name="saham-cerdas",
    primary="#2563eb",      # Brand blue - header, user bubbles
    secondary="#10b981",    # Emerald - assistant accent
    accent="#f59e0b",       # Amber - highlights
    foreground="#e5e7eb",   # Light text
    background="#0b1120",   # Deepest background
    success="#22c55e",
    warning="#f59e0b",
    error="#ef4444",
    surface="#111827",
    panel="#1f2937",
    dark=True,
    variables={
        "block-cursor-foreground": "#0b1120",
        "block-cursor-background": "#93c5fd",
        "block-cursor-text-style": "bold",

        "input-cursor-background": "#e5e7eb",
        "input-cursor-foreground": "#0b1120",
        "input-selection-background": "#2563eb 30%",

        "border": "#374151",
        "border-blurred": "#1f2937",

        "scrollbar": "#1f2937",
        "scrollbar-hover": "#374151",
        "scrollbar-active": "#2563eb",
        "scrollbar-background": "#111827",

        "footer-foreground": "#9ca3af",
        "footer-background": "#0b1120",
        "footer-key-foreground": "#f59e0b",
        "footer-key-background": "#1f2937",

        "text-muted": "#6b7280",
        "text-error": "#fca5a5",
    },
)
