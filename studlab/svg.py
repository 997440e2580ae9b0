# svg.py
# simple SVG writer for detection overlays

from xml.sax.saxutils import escape, quoteattr

def title_text(analysis):
    c = analysis.classification
    head = "STUDDED TIRE" if c.is_studded else "NON-STUDDED TIRE"
    return f"{head} (Count: {c.stud_count}, Density: {c.stud_density:.5f})"

def circle_el(cand, color="lime", width=0.7):
    return (f'<circle cx="{cand.x:.2f}" cy="{cand.y:.2f}" r="{cand.radius:.2f}" '
            f'stroke="{color}" stroke-width="{width}" />')

def write_overlay_svg(analysis, size, out_path, title=None, image_href=None):
    """Valid studs as green circles over an optional background image, titled with the verdict."""
    w,h=size
    title = title or title_text(analysis)
    parts=[f'<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" '
           f'width="{w}" height="{h+24}" viewBox="0 -24 {w} {h+24}">',
           f'<text x="4" y="-7" font-family="sans-serif" font-size="14">{escape(title)}</text>']
    if image_href:
        parts.append(f'<image x="0" y="0" width="{w}" height="{h}" xlink:href={quoteattr(image_href)} />')
    if analysis.failure is not None:
        parts.append(f'<text x="4" y="16" fill="red" font-family="sans-serif" font-size="12">{escape(analysis.failure.reason)}</text>')
    parts.append('<g fill="none">')
    for cand in analysis.valid:
        parts.append(circle_el(cand))
    parts.append('</g></svg>')
    with open(out_path,'w', encoding='utf-8') as f: f.write("\n".join(parts))
