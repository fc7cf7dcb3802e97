"""
Quick numeric checker for an Echo Studio output WAV.
Usage: python tools/quick_check_wav.py path/to/echo_alpha0.5_delay300ms.wav

Prints the container format and per-file levels, and flags anything the
engine should never produce: more than one channel, a subtype other than
PCM_16, or samples pinned at full scale (clipping the normalizer should
have prevented).
"""
import sys
import soundfile as sf
import numpy as np

FULL_SCALE = 32767

if len(sys.argv) < 2:
    print("Usage: python tools/quick_check_wav.py file.wav")
    raise SystemExit

f = sys.argv[1]
info = sf.info(f)
data, sr = sf.read(f, dtype='int16', always_2d=True)
n_ch = data.shape[1]
duration = data.shape[0] / sr

print("=" * 60)
print(f"File        : {f}")
print(f"Sample rate : {sr} Hz")
print(f"Channels    : {n_ch}")
print(f"Subtype     : {info.subtype}")
print(f"Duration    : {duration:.2f} s")
print("=" * 60)

for i in range(n_ch):
    ch = data[:, i].astype(np.int64)
    peak = int(np.max(np.abs(ch))) if len(ch) else 0
    rms  = float(np.sqrt(np.mean(ch ** 2))) if len(ch) else 0.0
    pinned = int(np.count_nonzero(np.abs(ch) >= FULL_SCALE))
    print(f"  Ch{i}: peak={peak} ({peak / 32768:.3f} FS)  rms={rms:.1f}  pinned={pinned}")

print()
problems = []
if n_ch != 1:
    problems.append(f"expected mono, got {n_ch} channels")
if info.subtype != 'PCM_16':
    problems.append(f"expected PCM_16, got {info.subtype}")
if n_ch and np.count_nonzero(np.abs(data.astype(np.int64)) >= FULL_SCALE) > 1:
    problems.append("several samples at full scale, output was clipped")

if problems:
    for p in problems:
        print(f"  [!!] {p}")
else:
    print("  [OK] mono 16-bit PCM, no clipping")
print("=" * 60)
