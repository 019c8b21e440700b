from rw_billing.schemas import SessionState


def build_session_report(state: SessionState) -> str:
    """
    Build a plain-text summary of a walkthrough: status, selections,
    billing sequence and outcome.
    """
    lines = []

    lines.append("=" * 80)
    lines.append("RYAN WHITE PHARMACY BILLING SEQUENCE")
    lines.append("=" * 80)
    lines.append("")

    # ---------------------------
    # Status
    # ---------------------------
    traffic = state.traffic
    lines.append(f"🚦 Status: {traffic.state.value.upper()}")
    for reason in traffic.reasons:
        lines.append(f"  • {reason}")
    for callout in traffic.callouts:
        lines.append(f"  ⚠️  {callout}")

    # ---------------------------
    # Selections
    # ---------------------------
    lines.append("")
    lines.append("📋 Selections:")
    lines.append("-" * 80)
    for item in state.selections:
        lines.append(f"  {item.label}: {item.value}")

    # ---------------------------
    # Billing sequence
    # ---------------------------
    sequence = state.billing_sequence
    lines.append("")
    lines.append("💳 Billing Sequence:")
    lines.append("-" * 80)
    if not sequence.steps:
        lines.append("  Complete selections to see sequence")
    for idx, step in enumerate(sequence.steps, start=1):
        lines.append(f"  {idx}. [{step.badge}] {step.label}")
    if sequence.note:
        lines.append("")
        lines.append(f"  Note: {sequence.note}")

    # ---------------------------
    # Outcome
    # ---------------------------
    lines.append("")
    lines.append("=" * 80)
    lines.append(f"RESULT: {state.result.message}")
    if state.result.shadow_claim:
        lines.append("Shadow claim required (PI2MEDCO)")
    lines.append("=" * 80)

    return "\n".join(lines)
