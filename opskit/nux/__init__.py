"""Linux system metrics read from /proc and /sys."""