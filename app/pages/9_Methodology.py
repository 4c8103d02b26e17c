import streamlit as st

st.set_page_config(page_title="Methodology", layout="wide")
st.title("Methodology")

st.markdown(
    r"""
### Erlang C

- Offered load (Erlangs), rounded half-up to 4 decimals and reused everywhere:
  \[
  a = \text{volume} \cdot \frac{\text{AHT}}{\text{interval\_length}}
  \]

- Probability of wait (Erlang C):
  \[
  X = \frac{a^N}{N!}\cdot\frac{N}{N-a}, \quad
  Y = \sum_{i=0}^{N-1}\frac{a^i}{i!}, \quad
  P_W = \frac{X}{Y + X}
  \]

- Service Level at threshold \(t\):
  \[
  SL(t)=1 - P_W\cdot e^{-(N-a)\cdot(t/AHT)}
  \]

All terms are exact rationals; only \(e^x\) is rounded (30 significant digits).
Factorials come from a memoized prime-swing implementation.

### Staffing logic

- Start at \(N = \lfloor a \rfloor + 1\) and add agents until \(SL(t) \ge\) target.
- If max occupancy \(m > 0\), add agents while
  \[
  \frac{a}{N} \ge m
  \]
- Convert to **headcount** using shrinkage (1.0 is treated as 0.99999):
  \[
  \text{headcount} = \left\lceil \frac{N}{1-\text{shrinkage}} \right\rceil
  \]
- Negative volume or AHT \(\le 0\): no search, one agent before shrinkage.
"""
)
