from dispatch_bench.cli import main

raise SystemExit(main())
